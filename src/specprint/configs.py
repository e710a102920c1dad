"""Reading analysis configuration files and command-line overrides.

Every failure here (missing file, malformed YAML, bad dotlist entry) is
reported as :class:`~specprint.errors.InvalidArgumentError` so callers see one
error type for a bad invocation.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Iterable

import yaml

from .errors import InvalidArgumentError

try:
    _omegaconf = importlib.import_module("omegaconf")
except ModuleNotFoundError as exc:
    raise RuntimeError(
        "specprint requires 'omegaconf'. Install it with `pip install omegaconf`."
    ) from exc

OmegaConf = _omegaconf.OmegaConf
OmegaConfError = _omegaconf.errors.OmegaConfBaseException


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Return the mapping stored in the YAML file ``path``."""
    source = Path(path)
    try:
        cfg = OmegaConf.load(source)
    except OSError as exc:
        raise InvalidArgumentError(f"Unable to read config file {source}: {exc}") from exc
    except (yaml.YAMLError, OmegaConfError) as exc:
        raise InvalidArgumentError(f"Malformed config file {source}: {exc}") from exc
    data = OmegaConf.to_container(cfg, resolve=True)
    if not isinstance(data, dict):
        raise InvalidArgumentError(
            f"Config file {source} must hold a mapping, got {type(data).__name__}"
        )
    return {str(key): value for key, value in data.items()}


def apply_overrides(
    data: dict[str, Any],
    overrides: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Return ``data`` with ``key.path=value`` overrides merged in."""
    entries = [item for item in (overrides or []) if item]
    if not entries:
        return dict(data)
    for entry in entries:
        if "=" not in entry:
            raise InvalidArgumentError(f"Override must look like key=value, got {entry!r}")
    try:
        merged = OmegaConf.merge(OmegaConf.create(data), OmegaConf.from_dotlist(entries))
        return OmegaConf.to_container(merged, resolve=True)
    except (yaml.YAMLError, OmegaConfError) as exc:
        raise InvalidArgumentError(f"Invalid override: {exc}") from exc
