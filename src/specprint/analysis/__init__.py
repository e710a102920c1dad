"""Hop analysis engine and end-to-end pipeline."""

from .engine import DEFAULT_HOP_SIZE, SpectralEngine, analyze_samples
from .pipeline import AnalysisReport, build_decoder, run_analysis
from .table import MagnitudeTable

__all__ = [
    "AnalysisReport",
    "DEFAULT_HOP_SIZE",
    "MagnitudeTable",
    "SpectralEngine",
    "analyze_samples",
    "build_decoder",
    "run_analysis",
]
