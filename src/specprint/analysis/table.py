"""Two-dimensional hop-by-bin magnitude storage."""

from __future__ import annotations

import numpy as np

from ..errors import AllocationError, InvalidArgumentError


class MagnitudeTable:
    """Magnitude spectra stored as ``values[hop_index, bin_index]``."""

    def __init__(self, n_hops: int, n_bins: int, hop_size: int) -> None:
        if n_hops < 0 or n_bins <= 0:
            raise InvalidArgumentError(
                f"Invalid table shape ({n_hops}, {n_bins})"
            )
        try:
            self.values = np.zeros((n_hops, n_bins), dtype=np.float64)
        except MemoryError as exc:
            raise AllocationError(
                f"Unable to allocate magnitude table of shape ({n_hops}, {n_bins})"
            ) from exc
        self.hop_size = int(hop_size)

    @property
    def n_hops(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_bins(self) -> int:
        return int(self.values.shape[1])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_hops, self.n_bins)

    def write(self, hop_index: int, magnitudes: np.ndarray) -> None:
        """Store the magnitudes of one hop in row ``hop_index``."""
        row = np.asarray(magnitudes, dtype=np.float64)
        if row.shape != (self.n_bins,):
            raise InvalidArgumentError(
                f"Expected {self.n_bins} magnitudes, got shape {row.shape}"
            )
        self.values[hop_index] = row

    def frequencies(self, sample_rate: int) -> np.ndarray:
        """Return bin centre frequencies in Hz."""
        return np.arange(self.n_bins, dtype=np.float64) * sample_rate / self.hop_size

    def hop_times(self, sample_rate: int) -> np.ndarray:
        """Return hop start times in seconds."""
        return np.arange(self.n_hops, dtype=np.float64) * self.hop_size / sample_rate

    def peak_bins(self) -> np.ndarray:
        """Return the index of the strongest bin in each hop."""
        return np.argmax(self.values, axis=1)
