"""Growable interleaved PCM buffer."""

from __future__ import annotations

import logging

import numpy as np

from ..errors import AllocationError, InvalidArgumentError

LOGGER = logging.getLogger(__name__)

PCM_DTYPE = np.int16

# Initial capacity covers this many seconds of interleaved audio.
INITIAL_SECONDS = 2


def _allocate(capacity: int) -> np.ndarray:
    try:
        return np.empty(capacity, dtype=PCM_DTYPE)
    except MemoryError as exc:
        raise AllocationError(
            f"Unable to allocate sample buffer of {capacity} samples"
        ) from exc


def _as_pcm(block: np.ndarray) -> np.ndarray:
    values = np.asarray(block).reshape(-1)
    if values.dtype == PCM_DTYPE or values.shape[0] == 0:
        return values.astype(PCM_DTYPE, copy=False)
    if values.dtype.kind not in "iu":
        raise InvalidArgumentError(f"Expected integer PCM samples, got {values.dtype}")
    limits = np.iinfo(PCM_DTYPE)
    if values.min() < limits.min or values.max() > limits.max:
        raise InvalidArgumentError(
            f"PCM samples outside [{limits.min}, {limits.max}]"
        )
    return values.astype(PCM_DTYPE)


class AudioBuffer:
    """Dynamic array of interleaved 16-bit samples.

    Capacity starts at ``sample_rate * channels * 2`` samples (about two
    seconds of audio) and doubles whenever an append would overflow it, so
    appends run in amortized constant time per sample. Samples already in the
    buffer keep their positions across growth.

    Parameters
    ----------
    sample_rate:
        Sampling rate in Hz.
    channels:
        Number of interleaved channels per frame.
    initial_capacity:
        Optional explicit starting capacity in samples.
    """

    def __init__(
        self,
        sample_rate: int,
        channels: int,
        *,
        initial_capacity: int | None = None,
    ) -> None:
        if sample_rate <= 0:
            raise InvalidArgumentError(f"sample_rate must be positive, got {sample_rate}")
        if channels <= 0:
            raise InvalidArgumentError(f"channels must be positive, got {channels}")
        if initial_capacity is None:
            initial_capacity = sample_rate * channels * INITIAL_SECONDS
        self.sample_rate = int(sample_rate)
        self.channels = int(channels)
        self._data = _allocate(max(1, int(initial_capacity)))
        self._count = 0

    @property
    def capacity(self) -> int:
        """Return the number of samples the buffer can hold without growing."""
        return int(self._data.shape[0])

    @property
    def count(self) -> int:
        """Return the number of interleaved samples stored."""
        return self._count

    def __len__(self) -> int:
        return self._count

    @property
    def frames(self) -> int:
        """Return the number of complete frames stored."""
        return self._count // self.channels

    @property
    def duration(self) -> float:
        """Return the stored duration in seconds."""
        return self._count / self.channels / float(self.sample_rate)

    @property
    def samples(self) -> np.ndarray:
        """Return a view of the filled region."""
        return self._data[: self._count]

    def append(self, block: np.ndarray) -> None:
        """Append interleaved samples, doubling capacity on overflow.

        ``block`` must hold integers within the 16-bit range; floats and
        out-of-range values are rejected rather than truncated or wrapped.
        """
        values = _as_pcm(block)
        if values.shape[0] == 0:
            return
        needed = self._count + values.shape[0]
        if needed > self.capacity:
            self._grow(needed)
        self._data[self._count : needed] = values
        self._count = needed

    def _grow(self, needed: int) -> None:
        capacity = self.capacity
        while capacity < needed:
            capacity *= 2
        LOGGER.debug("Growing sample buffer %d -> %d samples", self.capacity, capacity)
        grown = _allocate(capacity)
        grown[: self._count] = self._data[: self._count]
        self._data = grown

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(sample_rate={self.sample_rate}, "
            f"channels={self.channels}, count={self._count}, capacity={self.capacity})"
        )
