import numpy as np
import pytest

from specprint import (
    DEFAULT_HOP_SIZE,
    AllocationError,
    BluesteinStrategy,
    InvalidArgumentError,
    PowerOfTwoStrategy,
    resolve_strategy,
)
from specprint.registry import RegistryError


@pytest.mark.parametrize("size", [1, 2, 3, 7, 100, 1000, 1023])
def test_bluestein_matches_reference_dft(size: int) -> None:
    rng = np.random.default_rng(size)
    window = rng.standard_normal(size)
    strategy = BluesteinStrategy(size)
    expected = np.fft.fft(window)
    np.testing.assert_allclose(
        strategy.spectrum(window), expected, rtol=1e-9, atol=1e-9 * np.abs(expected).max()
    )


def test_bluestein_convolution_size_covers_linear_convolution() -> None:
    strategy = BluesteinStrategy(1000)
    assert strategy.conv_size == 2048
    assert strategy.conv_size >= 2 * strategy.size - 1


@pytest.mark.parametrize("size", [8, 256, 1024])
def test_power_of_two_and_bluestein_magnitudes_agree(size: int) -> None:
    rng = np.random.default_rng(42)
    window = rng.uniform(-32768, 32767, size)
    direct = PowerOfTwoStrategy(size).magnitudes(window)
    chirp = BluesteinStrategy(size).magnitudes(window)
    assert direct.shape == (size // 2 + 1,)
    np.testing.assert_allclose(chirp, direct, rtol=1e-9, atol=1e-9 * direct.max())


def test_magnitudes_match_reference_rfft() -> None:
    rng = np.random.default_rng(5)
    window = rng.standard_normal(999)
    np.testing.assert_allclose(
        BluesteinStrategy(999).magnitudes(window),
        np.abs(np.fft.rfft(window)),
        rtol=1e-9,
        atol=1e-9,
    )


def test_magnitudes_are_fresh_arrays() -> None:
    strategy = PowerOfTwoStrategy(16)
    first = strategy.magnitudes(np.ones(16))
    strategy.magnitudes(np.zeros(16))
    assert first[0] == pytest.approx(16.0)


def test_resolve_auto_selects_by_length() -> None:
    assert isinstance(resolve_strategy(1024), PowerOfTwoStrategy)
    assert isinstance(resolve_strategy(159840), BluesteinStrategy)


def test_resolve_forced_bluestein_for_power_of_two() -> None:
    assert isinstance(resolve_strategy(64, "bluestein"), BluesteinStrategy)


def test_power_of_two_strategy_rejects_other_sizes() -> None:
    with pytest.raises(InvalidArgumentError):
        resolve_strategy(100, "power_of_two")


def test_resolve_rejects_unknown_strategy() -> None:
    with pytest.raises(RegistryError, match="Unknown strategy"):
        resolve_strategy(64, "radix3")


@pytest.mark.parametrize("size", [0, -1])
def test_resolve_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(InvalidArgumentError):
        resolve_strategy(size)


def test_bluestein_table_allocation_failure_raises_allocation_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _out_of_memory(*args: object, **kwargs: object) -> np.ndarray:
        raise MemoryError

    monkeypatch.setattr(np, "empty", _out_of_memory)
    with pytest.raises(AllocationError, match="Unable to allocate"):
        BluesteinStrategy(100)


def test_bluestein_matches_rfft_at_default_hop_size() -> None:
    rng = np.random.default_rng(159840)
    window = rng.integers(-32768, 32767, DEFAULT_HOP_SIZE).astype(np.float64)
    expected = np.abs(np.fft.rfft(window))
    magnitudes = BluesteinStrategy(DEFAULT_HOP_SIZE).magnitudes(window)
    assert magnitudes.shape == (DEFAULT_HOP_SIZE // 2 + 1,)
    np.testing.assert_allclose(
        magnitudes, expected, rtol=1e-9, atol=1e-9 * expected.max()
    )
