from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from specprint import DecodeError, SpecprintConfig, run_analysis
from specprint.config_schema import parse_config


def test_sine_end_to_end(sine_wav: Path) -> None:
    cfg = parse_config({"analysis": {"hop_size": 1024}})
    report = run_analysis(sine_wav, cfg)

    assert report.sample_rate == 44100
    assert report.channels == 1
    assert report.num_samples == 44100
    assert report.duration == pytest.approx(1.0)
    assert report.spectrum.shape == (44100 // 1024, 513)
    assert np.all(report.spectrum.peak_bins() == 10)
    assert report.elapsed >= 0.0


def test_default_hop_drops_short_file(sine_wav: Path) -> None:
    report = run_analysis(sine_wav, SpecprintConfig())
    assert report.hop_size == 159840
    assert report.spectrum.shape == (0, 159840 // 2 + 1)


def test_stereo_analysis_uses_selected_channel(
    stereo_wav: tuple[Path, np.ndarray],
) -> None:
    path, frames = stereo_wav
    left = run_analysis(path, parse_config({"analysis": {"hop_size": 1000}}))
    right = run_analysis(
        path, parse_config({"analysis": {"hop_size": 1000, "channel": 1}})
    )
    assert left.num_samples == frames.size
    assert left.spectrum.n_hops == 5
    np.testing.assert_allclose(
        right.spectrum.values, left.spectrum.values, rtol=1e-9, atol=1e-6
    )


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        run_analysis(tmp_path / "missing.mp3")
