"""Spectral strategies computing the DFT of one analysis window."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

import numpy as np

from ..errors import AllocationError, InvalidArgumentError
from ..registry import Registry
from .fft import Radix2Plan, is_power_of_two, next_power_of_two

LOGGER = logging.getLogger(__name__)


def n_bins(size: int) -> int:
    """Return the one-sided bin count for a real transform of ``size``."""
    return size // 2 + 1


class SpectralStrategy(ABC):
    """Length-``size`` DFT with tables precomputed at construction.

    Strategies own mutable scratch buffers: use one instance per thread or
    process.
    """

    name: str = "strategy"

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise InvalidArgumentError(f"Transform size must be positive, got {size}")
        self.size = int(size)

    @property
    def n_bins(self) -> int:
        return n_bins(self.size)

    @abstractmethod
    def spectrum(self, window: np.ndarray) -> np.ndarray:
        """Return the full complex DFT of ``window``.

        The returned array is a strategy-owned buffer that the next call
        overwrites.
        """

    def magnitudes(self, window: np.ndarray) -> np.ndarray:
        """Return ``|X[k]|`` for ``k`` in ``[0, size // 2]`` as a new array."""
        return np.abs(self.spectrum(window)[: self.n_bins])


class PowerOfTwoStrategy(SpectralStrategy):
    """Direct radix-2 transform for power-of-two sizes."""

    name = "power_of_two"

    def __init__(self, size: int) -> None:
        super().__init__(size)
        if not is_power_of_two(self.size):
            raise InvalidArgumentError(
                f"{self.name} strategy requires a power-of-two size, got {self.size}"
            )
        self._plan = Radix2Plan(self.size)
        try:
            self._work = np.empty(self.size, dtype=np.complex128)
        except MemoryError as exc:
            raise AllocationError(
                f"Unable to allocate FFT scratch for size {self.size}"
            ) from exc

    def spectrum(self, window: np.ndarray) -> np.ndarray:
        return self._plan.forward(window, self._work)


class BluesteinStrategy(SpectralStrategy):
    """Chirp z-transform for arbitrary sizes.

    A length-``N`` DFT is rewritten as a circular convolution of length
    ``M = next_power_of_two(2N - 1)``::

        X[k] = w[k] * sum_n (x[n] w[n]) conj(w[k - n]),   w[k] = exp(-i pi k^2 / N)

    The kernel ``conj(w)`` and its transform are precomputed, so each call
    costs one forward and one inverse power-of-two FFT of size ``M``.
    """

    name = "bluestein"

    def __init__(self, size: int) -> None:
        super().__init__(size)
        n = self.size
        self.conv_size = next_power_of_two(2 * n - 1)
        if self.conv_size < 2 * n - 1:
            raise InvalidArgumentError(
                f"Convolution size {self.conv_size} is shorter than {2 * n - 1}"
            )
        self._plan = Radix2Plan(self.conv_size)
        try:
            self.chirp = self._chirp(n)
            kernel = np.zeros(self.conv_size, dtype=np.complex128)
            kernel[:n] = np.conj(self.chirp)
            # conj(w[m]) is even in m, so negative lags wrap to the tail.
            if n > 1:
                kernel[self.conv_size - n + 1 :] = kernel[n - 1 : 0 : -1]
            self._kernel_fft = self._plan.forward(
                kernel, np.empty(self.conv_size, dtype=np.complex128)
            )
            self._work = np.empty(self.conv_size, dtype=np.complex128)
            self._out = np.empty(n, dtype=np.complex128)
        except MemoryError as exc:
            raise AllocationError(
                f"Unable to allocate chirp tables for size {n}"
            ) from exc

    @staticmethod
    def _chirp(n: int) -> np.ndarray:
        k = np.arange(n, dtype=np.int64)
        # exp(-i pi k^2 / n) has period 2n in k^2.
        phase_index = (k * k) % (2 * n)
        angle = -np.pi * phase_index.astype(np.float64) / n
        return np.exp(1j * angle)

    def spectrum(self, window: np.ndarray) -> np.ndarray:
        n = self.size
        work = self._work
        np.multiply(np.asarray(window), self.chirp, out=work[:n])
        work[n:] = 0.0
        self._plan.forward(work, work)
        work *= self._kernel_fft
        self._plan.inverse(work, work)
        return np.multiply(work[:n], self.chirp, out=self._out)


strategy_registry: Registry[SpectralStrategy] = Registry(kind="strategy")
strategy_registry.register(PowerOfTwoStrategy.name, PowerOfTwoStrategy)
strategy_registry.register(BluesteinStrategy.name, BluesteinStrategy)


def resolve_strategy(size: int, name: str = "auto") -> SpectralStrategy:
    """Build the strategy for ``size``.

    ``"auto"`` selects :class:`PowerOfTwoStrategy` for power-of-two sizes and
    :class:`BluesteinStrategy` otherwise.
    """
    if size <= 0:
        raise InvalidArgumentError(f"Transform size must be positive, got {size}")
    if name == "auto":
        name = PowerOfTwoStrategy.name if is_power_of_two(size) else BluesteinStrategy.name
    strategy = strategy_registry.create(name, size)
    LOGGER.info("Using %s strategy for size %d", strategy.name, size)
    return strategy
