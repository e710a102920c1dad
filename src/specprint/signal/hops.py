"""Fixed-length, non-overlapping hop segmentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ..errors import InvalidArgumentError


@dataclass(frozen=True)
class Hop:
    """Read-only analysis window over mono samples.

    Attributes
    ----------
    index:
        Zero-based position of the hop in the sequence.
    offset:
        Index of the first sample covered by the hop.
    samples:
        Read-only view of ``samples[offset:offset + hop_size]``.
    """

    index: int
    offset: int
    samples: np.ndarray

    @property
    def stop(self) -> int:
        """Return the exclusive end index of the hop."""
        return self.offset + int(self.samples.shape[0])


class HopSegmenter:
    """Restartable iterable of consecutive hops.

    Hop ``k`` covers ``[k * hop_size, (k + 1) * hop_size)``. A trailing
    remainder shorter than ``hop_size`` is dropped rather than padded.
    """

    def __init__(self, samples: np.ndarray, hop_size: int) -> None:
        if hop_size <= 0:
            raise InvalidArgumentError(f"hop_size must be positive, got {hop_size}")
        view = np.asarray(samples).view()
        view.flags.writeable = False
        self.samples = view
        self.hop_size = int(hop_size)

    def __len__(self) -> int:
        return int(self.samples.shape[0]) // self.hop_size

    @property
    def remainder(self) -> int:
        """Return the number of trailing samples that no hop covers."""
        return int(self.samples.shape[0]) - len(self) * self.hop_size

    def __iter__(self) -> Iterator[Hop]:
        for index in range(len(self)):
            offset = index * self.hop_size
            yield Hop(
                index=index,
                offset=offset,
                samples=self.samples[offset : offset + self.hop_size],
            )
