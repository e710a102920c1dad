"""Iterative radix-2 Cooley-Tukey FFT with precomputed tables."""

from __future__ import annotations

import numpy as np

from ..errors import AllocationError, InvalidArgumentError


def is_power_of_two(n: int) -> bool:
    """Return ``True`` when ``n`` is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two greater than or equal to ``n``."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def bit_reversal_permutation(n: int) -> np.ndarray:
    """Return the bit-reversed index order for a power-of-two length ``n``."""
    if not is_power_of_two(n):
        raise InvalidArgumentError(f"Length must be a power of two, got {n}")
    perm = np.zeros(1, dtype=np.intp)
    while perm.shape[0] < n:
        perm = np.concatenate([perm * 2, perm * 2 + 1])
    return perm


class Radix2Plan:
    """Precomputed bit-reversal and twiddle tables for one FFT size.

    :meth:`forward` and :meth:`inverse` transform into a caller-supplied
    ``complex128`` buffer in place, using one half-length scratch array owned
    by the plan. A plan is therefore not safe to share between concurrent
    callers.
    """

    def __init__(self, size: int) -> None:
        if not is_power_of_two(size):
            raise InvalidArgumentError(f"FFT size must be a power of two, got {size}")
        self.size = int(size)
        try:
            self._perm = bit_reversal_permutation(self.size)
            self._stages: list[tuple[int, np.ndarray]] = []
            span = 2
            while span <= self.size:
                half = span // 2
                angle = -2.0 * np.pi * np.arange(half, dtype=np.float64) / span
                self._stages.append((span, np.exp(1j * angle)))
                span *= 2
            self._scratch = np.empty(max(1, self.size // 2), dtype=np.complex128)
        except MemoryError as exc:
            raise AllocationError(
                f"Unable to allocate FFT tables for size {self.size}"
            ) from exc

    def _check(self, out: np.ndarray) -> None:
        if out.shape != (self.size,) or out.dtype != np.complex128:
            raise InvalidArgumentError(
                f"Expected complex128 buffer of shape ({self.size},), "
                f"got {out.dtype} {out.shape}"
            )

    def _butterflies(self, out: np.ndarray) -> None:
        for span, twiddle in self._stages:
            half = span // 2
            blocks = out.reshape(-1, span)
            odd = self._scratch.reshape(-1, half)
            np.multiply(blocks[:, half:], twiddle, out=odd)
            np.subtract(blocks[:, :half], odd, out=blocks[:, half:])
            np.add(blocks[:, :half], odd, out=blocks[:, :half])

    def forward(self, data: np.ndarray, out: np.ndarray) -> np.ndarray:
        """Write the DFT of ``data`` into ``out`` and return ``out``."""
        self._check(out)
        out[:] = np.asarray(data)[self._perm]
        self._butterflies(out)
        return out

    def inverse(self, data: np.ndarray, out: np.ndarray) -> np.ndarray:
        """Write the inverse DFT of ``data`` into ``out`` and return ``out``."""
        self._check(out)
        out[:] = np.asarray(data)[self._perm]
        np.conjugate(out, out=out)
        self._butterflies(out)
        np.conjugate(out, out=out)
        out /= self.size
        return out


def fft(data: np.ndarray) -> np.ndarray:
    """Return the forward DFT of a power-of-two length sequence."""
    values = np.asarray(data)
    plan = Radix2Plan(values.shape[0])
    return plan.forward(values, np.empty(plan.size, dtype=np.complex128))


def ifft(data: np.ndarray) -> np.ndarray:
    """Return the inverse DFT of a power-of-two length sequence."""
    values = np.asarray(data)
    plan = Radix2Plan(values.shape[0])
    return plan.inverse(values, np.empty(plan.size, dtype=np.complex128))
