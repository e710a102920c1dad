"""Typed OmegaConf schemas for analysis runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, TypeVar, cast

from .configs import OmegaConf, OmegaConfError, apply_overrides, read_config_file
from .errors import InvalidArgumentError


@dataclass
class AnalysisConfig:
    """Hop analysis configuration schema."""

    hop_size: int = 159840
    channel: int = 0
    strategy: str = "auto"
    window: str = "boxcar"
    workers: int = 1


@dataclass
class DecoderConfig:
    """Decoder backend configuration schema."""

    backend: str = "soundfile"
    block_frames: int = 4096
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_sample_rate: int = 48000
    ffmpeg_channels: int = 2


@dataclass
class RuntimeConfig:
    """Runtime configuration schema."""

    log_level: str = "INFO"


@dataclass
class SpecprintConfig:
    """Top-level configuration schema."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)


TSchema = TypeVar("TSchema")


def _decode_schema(
    data: Mapping[str, object],
    schema: type[TSchema],
) -> TSchema:
    try:
        base = OmegaConf.structured(schema)
        merged = OmegaConf.merge(base, OmegaConf.create(dict(data)))
        decoded = OmegaConf.to_object(merged)
    except OmegaConfError as exc:
        raise InvalidArgumentError(f"Invalid configuration: {exc}") from exc
    if not isinstance(decoded, schema):
        raise TypeError(f"Failed to decode config as {schema.__name__}")
    return cast(TSchema, decoded)


def parse_config(data: Mapping[str, object]) -> SpecprintConfig:
    """Decode a mapping into :class:`SpecprintConfig`."""
    return _decode_schema(data, SpecprintConfig)


def load_config(
    path: str | Path | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> SpecprintConfig:
    """Load ``path`` (or the defaults) and apply dotlist ``overrides``."""
    data = read_config_file(path) if path is not None else {}
    return parse_config(apply_overrides(data, overrides))


def config_to_dict(config: SpecprintConfig) -> dict[str, Any]:
    """Convert :class:`SpecprintConfig` to a plain dictionary."""
    return asdict(config)
