import numpy as np
import pytest

from specprint import (
    DEFAULT_HOP_SIZE,
    InvalidArgumentError,
    MagnitudeTable,
    SpectralEngine,
    SpectralStrategy,
    analyze_samples,
    resolve_strategy,
)
from specprint.analysis import engine as engine_module


def _sine(freq: float, sample_rate: int, n_samples: int, amplitude: float = 1.0) -> np.ndarray:
    t = np.arange(n_samples, dtype=np.float64) / sample_rate
    return amplitude * np.sin(2.0 * np.pi * freq * t)


@pytest.mark.parametrize("hop_size", [1024, 1000])
def test_sine_peaks_at_expected_bin(hop_size: int) -> None:
    sample_rate = 44100
    engine = SpectralEngine(hop_size)
    magnitudes = engine.transform(_sine(440.0, sample_rate, hop_size, 1000.0))
    assert magnitudes.shape == (hop_size // 2 + 1,)
    assert int(np.argmax(magnitudes)) == round(440.0 * hop_size / sample_rate)


def test_peak_magnitude_scales_linearly_with_amplitude() -> None:
    engine = SpectralEngine(882)
    quiet = engine.transform(_sine(1000.0, 44100, 882, 100.0))
    loud = engine.transform(_sine(1000.0, 44100, 882, 300.0))
    peak = int(np.argmax(quiet))
    assert loud[peak] == pytest.approx(3.0 * quiet[peak], rel=1e-9)


@pytest.mark.parametrize("hop_size", [512, 441])
def test_transform_is_bit_identical_on_repeat(hop_size: int) -> None:
    rng = np.random.default_rng(0)
    window = rng.integers(-32768, 32767, hop_size).astype(np.float64)
    engine = SpectralEngine(hop_size)
    first = engine.transform(window)
    second = engine.transform(window)
    assert np.array_equal(first, second)
    assert first is not second


def test_magnitudes_are_finite_and_non_negative_for_full_scale_input() -> None:
    engine = SpectralEngine(300)
    window = np.full(300, 32767.0)
    window[::2] = -32768.0
    magnitudes = engine.transform(window)
    assert np.all(np.isfinite(magnitudes))
    assert np.all(magnitudes >= 0.0)


def test_hann_window_changes_spectrum_shape() -> None:
    signal = _sine(440.0, 44100, 1024, 1.0)
    plain = SpectralEngine(1024).transform(signal)
    hann = SpectralEngine(1024, window="hann").transform(signal)
    assert int(np.argmax(hann)) == int(np.argmax(plain))
    assert hann[200] < plain[200]


@pytest.mark.parametrize("hop_size", [0, -10])
def test_engine_rejects_non_positive_hop(hop_size: int) -> None:
    with pytest.raises(InvalidArgumentError):
        SpectralEngine(hop_size)


def test_engine_rejects_wrong_window_length() -> None:
    with pytest.raises(InvalidArgumentError, match="Expected window"):
        SpectralEngine(8).transform(np.zeros(7))


def test_analyze_writes_one_row_per_hop() -> None:
    samples = np.concatenate(
        [
            _sine(1000.0, 8000, 64, 10.0),
            _sine(2000.0, 8000, 64, 10.0),
            _sine(3000.0, 8000, 64, 10.0),
            np.zeros(10),
        ]
    )
    table = analyze_samples(samples, 64)
    assert isinstance(table, MagnitudeTable)
    assert table.shape == (3, 33)
    np.testing.assert_array_equal(table.peak_bins(), [8, 16, 24])


def test_analyze_rows_do_not_alias_between_hops() -> None:
    rng = np.random.default_rng(9)
    samples = rng.standard_normal(40)
    table = analyze_samples(samples, 10)
    engine = SpectralEngine(10)
    for index in range(4):
        expected = engine.transform(samples[index * 10 : (index + 1) * 10])
        np.testing.assert_array_equal(table.values[index], expected)


def test_analyze_short_input_yields_empty_table() -> None:
    table = analyze_samples(np.zeros(5), 8)
    assert table.shape == (0, 5)


def test_parallel_analysis_matches_sequential() -> None:
    rng = np.random.default_rng(4)
    samples = rng.standard_normal(6 * 100 + 7)
    sequential = analyze_samples(samples, 100, workers=1)
    parallel = analyze_samples(samples, 100, workers=2)
    np.testing.assert_array_equal(parallel.values, sequential.values)


def test_table_axes() -> None:
    table = MagnitudeTable(3, 513, 1024)
    freqs = table.frequencies(44100)
    assert freqs[0] == 0.0
    assert freqs[-1] == pytest.approx(22050.0)
    np.testing.assert_allclose(table.hop_times(44100), [0.0, 1024 / 44100, 2048 / 44100])


def test_table_rejects_wrong_row_length() -> None:
    table = MagnitudeTable(1, 5, 8)
    with pytest.raises(InvalidArgumentError):
        table.write(0, np.zeros(4))


def test_strategy_is_resolved_once_per_run(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[int, str]] = []

    def _counting_resolve(size: int, name: str = "auto") -> SpectralStrategy:
        calls.append((size, name))
        return resolve_strategy(size, name)

    monkeypatch.setattr(engine_module, "resolve_strategy", _counting_resolve)
    table = analyze_samples(np.ones(5 * 30), 30)
    assert table.n_hops == 5
    assert calls == [(30, "auto")]


def test_default_hop_size_sine_peak() -> None:
    sample_rate = 48000
    engine = SpectralEngine(DEFAULT_HOP_SIZE)
    magnitudes = engine.transform(_sine(440.0, sample_rate, DEFAULT_HOP_SIZE, 1000.0))
    assert int(np.argmax(magnitudes)) == round(440.0 * DEFAULT_HOP_SIZE / sample_rate)
    assert np.all(np.isfinite(magnitudes))


@pytest.mark.parametrize("workers", [0, -2])
def test_analyze_rejects_non_positive_worker_count(workers: int) -> None:
    with pytest.raises(InvalidArgumentError, match="workers"):
        analyze_samples(np.zeros(20), 10, workers=workers)


def test_unknown_window_name_is_invalid_argument() -> None:
    with pytest.raises(InvalidArgumentError, match="Invalid window"):
        SpectralEngine(16, window="not-a-window")
