"""End-to-end decode and hop analysis of one audio file."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time

from ..audio.channels import extract_channel
from ..audio.decoder import Decoder, create_decoder, decode_file
from ..config_schema import DecoderConfig, SpecprintConfig
from .engine import analyze_samples
from .table import MagnitudeTable

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """Summary and result table of one analysis run.

    Attributes
    ----------
    path:
        Analyzed file.
    sample_rate:
        Decoded sampling rate in Hz.
    channels:
        Number of interleaved channels in the decoded stream.
    num_samples:
        Total interleaved sample count.
    hop_size:
        Hop length in samples.
    elapsed:
        Wall-clock seconds spent in the hop loop.
    spectrum:
        Magnitudes of shape ``(n_hops, hop_size // 2 + 1)``.
    """

    path: Path
    sample_rate: int
    channels: int
    num_samples: int
    hop_size: int
    elapsed: float
    spectrum: MagnitudeTable

    @property
    def duration(self) -> float:
        """Return the decoded duration in seconds."""
        return self.num_samples / self.channels / float(self.sample_rate)


def build_decoder(config: DecoderConfig) -> Decoder:
    """Instantiate the decoder backend selected by ``config``."""
    if config.backend == "ffmpeg":
        return create_decoder(
            config.backend,
            binary=config.ffmpeg_binary,
            sample_rate=config.ffmpeg_sample_rate,
            channels=config.ffmpeg_channels,
            block_frames=config.block_frames,
        )
    return create_decoder(config.backend, block_frames=config.block_frames)


def run_analysis(
    path: str | Path,
    config: SpecprintConfig | None = None,
    *,
    decoder: Decoder | None = None,
) -> AnalysisReport:
    """Decode ``path`` and compute the magnitude spectrum of every hop."""
    cfg = config if config is not None else SpecprintConfig()
    backend = decoder if decoder is not None else build_decoder(cfg.decoder)

    buffer = decode_file(path, backend)
    sample_rate = buffer.sample_rate
    channels = buffer.channels
    num_samples = buffer.count
    mono = extract_channel(buffer, cfg.analysis.channel)
    del buffer

    start = time.perf_counter()
    spectrum = analyze_samples(
        mono,
        cfg.analysis.hop_size,
        strategy=cfg.analysis.strategy,
        window=cfg.analysis.window,
        workers=cfg.analysis.workers,
    )
    elapsed = time.perf_counter() - start
    LOGGER.info("Processing loop took %.6f seconds", elapsed)

    return AnalysisReport(
        path=Path(path),
        sample_rate=sample_rate,
        channels=channels,
        num_samples=num_samples,
        hop_size=cfg.analysis.hop_size,
        elapsed=elapsed,
        spectrum=spectrum,
    )
