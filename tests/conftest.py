from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def write_pcm16(path: Path, data: np.ndarray, sample_rate: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(path, data, sample_rate, subtype="PCM_16")
    return path


@pytest.fixture
def sine_wav(tmp_path: Path) -> Path:
    """One second of a 440 Hz mono sine at 44.1 kHz."""
    sample_rate = 44100
    t = np.arange(sample_rate, dtype=np.float64) / sample_rate
    data = np.round(16000.0 * np.sin(2.0 * np.pi * 440.0 * t)).astype(np.int16)
    return write_pcm16(tmp_path / "sine.wav", data, sample_rate)


@pytest.fixture
def stereo_wav(tmp_path: Path) -> tuple[Path, np.ndarray]:
    frames = np.stack(
        [np.arange(0, 5000, dtype=np.int16), -np.arange(0, 5000, dtype=np.int16)],
        axis=1,
    )
    return write_pcm16(tmp_path / "stereo.wav", frames, 8000), frames
