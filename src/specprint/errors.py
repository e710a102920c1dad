"""Exception hierarchy shared across specprint."""

from __future__ import annotations


class SpecprintError(Exception):
    """Base class for all errors raised by specprint."""


class DecodeError(SpecprintError):
    """Raised when an audio file cannot be opened or decoded."""


class AllocationError(SpecprintError, MemoryError):
    """Raised when a sample buffer or FFT table cannot be allocated."""


class InvalidArgumentError(SpecprintError, ValueError):
    """Raised for invalid sizes, indices, or option values."""
