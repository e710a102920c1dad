from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import yaml

from .analysis.pipeline import AnalysisReport, run_analysis
from .audio.decoder import decoder_registry
from .config_schema import config_to_dict, load_config
from .errors import InvalidArgumentError, SpecprintError
from .logging_utils import configure_logging
from .signal.strategies import strategy_registry

LOGGER = logging.getLogger(__name__)


class _UsageParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog="specprint",
        description="Decode an audio file and compute hop-wise magnitude spectra",
    )
    parser.add_argument("path", type=Path, help="Audio file to analyze (e.g. MP3).")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML configuration file.",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="OmegaConf-style override, e.g. analysis.hop_size=1024",
    )
    parser.add_argument("--hop-size", type=int, default=None, help="Hop length in samples.")
    parser.add_argument("--channel", type=int, default=None, help="Channel to analyze.")
    parser.add_argument(
        "--strategy",
        choices=["auto", *strategy_registry.available()],
        default=None,
        help="Spectral strategy.",
    )
    parser.add_argument(
        "--window", default=None, help="Analysis window name (default: boxcar)."
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Number of worker processes."
    )
    parser.add_argument(
        "--decoder",
        choices=decoder_registry.available(),
        default=None,
        help="Decoder backend.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level.")
    return parser


def _cli_overrides(args: argparse.Namespace) -> list[str]:
    pairs = {
        "analysis.hop_size": args.hop_size,
        "analysis.channel": args.channel,
        "analysis.strategy": args.strategy,
        "analysis.window": args.window,
        "analysis.workers": args.workers,
        "decoder.backend": args.decoder,
        "runtime.log_level": args.log_level,
    }
    return [f"{key}={value}" for key, value in pairs.items() if value is not None]


def print_report(report: AnalysisReport) -> None:
    """Print the run summary to standard output."""
    print(f"Sample rate: {report.sample_rate} Hz")
    print(f"Channels: {report.channels}")
    print(f"Successfully extracted {report.num_samples} samples")
    print(f"Duration: {report.duration:.2f} seconds")
    print(
        f"Hops: {report.spectrum.n_hops} x {report.spectrum.n_bins} bins "
        f"(hop size {report.hop_size})"
    )
    print(f"Processing loop took {report.elapsed:.6f} seconds")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = [*args.set, *_cli_overrides(args)]

    try:
        cfg = load_config(args.config, overrides=overrides)
        configure_logging(cfg.runtime.log_level)
        LOGGER.debug(
            "Resolved configuration:\n%s",
            yaml.safe_dump(config_to_dict(cfg), sort_keys=False),
        )
        report = run_analysis(args.path, cfg)
    except InvalidArgumentError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1
    except SpecprintError as exc:
        print(f"Failed to analyze {args.path}: {exc}", file=sys.stderr)
        return 1

    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
