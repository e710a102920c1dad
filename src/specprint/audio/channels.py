"""Channel extraction from interleaved PCM."""

from __future__ import annotations

import numpy as np

from ..errors import AllocationError, InvalidArgumentError
from .buffer import AudioBuffer


def extract_channel(buffer: AudioBuffer, channel: int = 0) -> np.ndarray:
    """Return one channel of ``buffer`` as a contiguous ``float64`` array.

    The result has ``buffer.count // buffer.channels`` samples; a trailing
    partial frame is ignored.
    """
    if not 0 <= channel < buffer.channels:
        raise InvalidArgumentError(
            f"Channel {channel} out of range for {buffer.channels}-channel audio"
        )
    n_frames = buffer.frames
    frames = buffer.samples[: n_frames * buffer.channels].reshape(
        n_frames, buffer.channels
    )
    try:
        return frames[:, channel].astype(np.float64)
    except MemoryError as exc:
        raise AllocationError(
            f"Unable to allocate mono buffer of {n_frames} samples"
        ) from exc
