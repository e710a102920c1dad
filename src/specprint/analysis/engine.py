"""Hop-wise magnitude spectrum computation.

:class:`SpectralEngine` binds one hop size to a resolved strategy and an
optional analysis window. :func:`analyze_samples` drives the hop loop either
sequentially or across a process pool, where every worker process builds its
own engine so scratch buffers are never shared.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
import logging
import os

import numpy as np

from ..errors import InvalidArgumentError
from ..signal.hops import HopSegmenter
from ..signal.strategies import SpectralStrategy, n_bins, resolve_strategy
from ..signal.window import build_window
from .table import MagnitudeTable

LOGGER = logging.getLogger(__name__)

DEFAULT_HOP_SIZE = 159840


class SpectralEngine:
    """Magnitude spectrum of fixed-length windows.

    Parameters
    ----------
    hop_size:
        Window length in samples.
    strategy:
        ``"auto"``, ``"power_of_two"`` or ``"bluestein"``.
    window:
        Analysis window name understood by :func:`scipy.signal.get_window`;
        ``"boxcar"`` applies none.
    """

    def __init__(
        self,
        hop_size: int,
        *,
        strategy: str = "auto",
        window: str | None = "boxcar",
    ) -> None:
        if hop_size <= 0:
            raise InvalidArgumentError(f"hop_size must be positive, got {hop_size}")
        self.hop_size = int(hop_size)
        self.strategy: SpectralStrategy = resolve_strategy(self.hop_size, strategy)
        self.window = build_window(window, self.hop_size)
        self._input = np.empty(self.hop_size, dtype=np.float64)

    @property
    def n_bins(self) -> int:
        return n_bins(self.hop_size)

    def transform(self, window: np.ndarray) -> np.ndarray:
        """Return the one-sided magnitude spectrum of ``window``."""
        samples = np.asarray(window, dtype=np.float64)
        if samples.shape != (self.hop_size,):
            raise InvalidArgumentError(
                f"Expected window of {self.hop_size} samples, got shape {samples.shape}"
            )
        if self.window is None:
            return self.strategy.magnitudes(samples)
        np.multiply(samples, self.window, out=self._input)
        return self.strategy.magnitudes(self._input)


_WORKER_ENGINE: SpectralEngine | None = None


def _init_worker(hop_size: int, strategy: str, window: str | None) -> None:
    global _WORKER_ENGINE
    _WORKER_ENGINE = SpectralEngine(hop_size, strategy=strategy, window=window)


def _transform_in_worker(index: int, samples: np.ndarray) -> tuple[int, np.ndarray]:
    assert _WORKER_ENGINE is not None  # set by _init_worker
    return index, _WORKER_ENGINE.transform(samples)


def analyze_samples(
    samples: np.ndarray,
    hop_size: int = DEFAULT_HOP_SIZE,
    *,
    strategy: str = "auto",
    window: str | None = "boxcar",
    workers: int | None = 1,
) -> MagnitudeTable:
    """Compute the magnitude spectrum of every full hop in ``samples``.

    Parameters
    ----------
    samples:
        Mono samples.
    hop_size:
        Hop length in samples; a trailing partial hop is dropped.
    strategy, window:
        Forwarded to :class:`SpectralEngine`.
    workers:
        Number of worker processes, at least 1. ``None`` uses
        ``os.cpu_count()``.

    Returns
    -------
    MagnitudeTable
        Table of shape ``(n_hops, hop_size // 2 + 1)``.
    """
    if workers is not None and workers < 1:
        raise InvalidArgumentError(f"workers must be at least 1, got {workers}")
    segmenter = HopSegmenter(samples, hop_size)
    table = MagnitudeTable(len(segmenter), n_bins(segmenter.hop_size), hop_size)
    worker_count = workers if workers is not None else (os.cpu_count() or 1)
    worker_count = max(1, min(int(worker_count), len(segmenter) or 1))
    LOGGER.info(
        "Analyzing %d hops of %d samples (%d dropped) with %d worker(s)",
        len(segmenter),
        segmenter.hop_size,
        segmenter.remainder,
        worker_count,
    )

    if worker_count == 1:
        engine = SpectralEngine(hop_size, strategy=strategy, window=window)
        for hop in segmenter:
            table.write(hop.index, engine.transform(hop.samples))
            LOGGER.debug("Completed hop %d/%d", hop.index + 1, len(segmenter))
        return table

    # Resolve eagerly so configuration errors surface in the parent process.
    SpectralEngine(hop_size, strategy=strategy, window=window)
    with ProcessPoolExecutor(
        max_workers=worker_count,
        initializer=_init_worker,
        initargs=(hop_size, strategy, window),
    ) as pool:
        futures = [
            pool.submit(_transform_in_worker, hop.index, np.array(hop.samples))
            for hop in segmenter
        ]
        for done, future in enumerate(as_completed(futures), start=1):
            index, magnitudes = future.result()
            table.write(index, magnitudes)
            LOGGER.debug("Completed hop %d/%d", done, len(segmenter))
    return table
