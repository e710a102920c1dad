"""specprint public API."""

from .analysis import (
    DEFAULT_HOP_SIZE,
    AnalysisReport,
    MagnitudeTable,
    SpectralEngine,
    analyze_samples,
    run_analysis,
)
from .audio import (
    AudioBuffer,
    FFmpegDecoder,
    SoundFileDecoder,
    decode_file,
    extract_channel,
)
from .config_schema import SpecprintConfig, load_config
from .errors import (
    AllocationError,
    DecodeError,
    InvalidArgumentError,
    SpecprintError,
)
from .logging_utils import configure_logging
from .signal import (
    BluesteinStrategy,
    Hop,
    HopSegmenter,
    PowerOfTwoStrategy,
    SpectralStrategy,
    resolve_strategy,
)

__all__ = [
    "AllocationError",
    "AnalysisReport",
    "AudioBuffer",
    "BluesteinStrategy",
    "DEFAULT_HOP_SIZE",
    "DecodeError",
    "FFmpegDecoder",
    "Hop",
    "HopSegmenter",
    "InvalidArgumentError",
    "MagnitudeTable",
    "PowerOfTwoStrategy",
    "SoundFileDecoder",
    "SpecprintConfig",
    "SpecprintError",
    "SpectralEngine",
    "SpectralStrategy",
    "analyze_samples",
    "configure_logging",
    "decode_file",
    "extract_channel",
    "load_config",
    "resolve_strategy",
    "run_analysis",
]
