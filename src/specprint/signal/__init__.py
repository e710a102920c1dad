"""Signal processing utilities."""

from .fft import Radix2Plan, fft, ifft, is_power_of_two, next_power_of_two
from .hops import Hop, HopSegmenter
from .strategies import (
    BluesteinStrategy,
    PowerOfTwoStrategy,
    SpectralStrategy,
    resolve_strategy,
    strategy_registry,
)
from .window import build_window

__all__ = [
    "BluesteinStrategy",
    "Hop",
    "HopSegmenter",
    "PowerOfTwoStrategy",
    "Radix2Plan",
    "SpectralStrategy",
    "build_window",
    "fft",
    "ifft",
    "is_power_of_two",
    "next_power_of_two",
    "resolve_strategy",
    "strategy_registry",
]
