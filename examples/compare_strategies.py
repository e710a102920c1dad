"""Compare the radix-2 and Bluestein strategies on a synthetic tone.

Usage
-----
``python examples/compare_strategies.py --hop-size 1024 --freq 440``
"""

from __future__ import annotations

import argparse
import time
from typing import Sequence

import numpy as np

from specprint import SpectralEngine, analyze_samples
from specprint.signal import is_power_of_two


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run hop analysis of a sine tone with both spectral strategies.",
    )
    parser.add_argument("--hop-size", type=int, default=1024, help="Hop length in samples.")
    parser.add_argument("--freq", type=float, default=440.0, help="Tone frequency in Hz.")
    parser.add_argument("--sample-rate", type=int, default=44100, help="Sampling rate in Hz.")
    parser.add_argument("--seconds", type=float, default=5.0, help="Signal length in seconds.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    n_samples = int(args.seconds * args.sample_rate)
    t = np.arange(n_samples, dtype=np.float64) / args.sample_rate
    samples = np.round(16000.0 * np.sin(2.0 * np.pi * args.freq * t))

    strategies = ["bluestein"]
    if is_power_of_two(args.hop_size):
        strategies.insert(0, "power_of_two")

    tables = {}
    for name in strategies:
        start = time.perf_counter()
        tables[name] = analyze_samples(samples, args.hop_size, strategy=name)
        elapsed = time.perf_counter() - start
        peaks = np.unique(tables[name].peak_bins())
        print(
            f"{name:>13}: {tables[name].n_hops} hops x {tables[name].n_bins} bins, "
            f"peak bins {peaks.tolist()}, {elapsed:.4f} s"
        )

    expected = round(args.freq * args.hop_size / args.sample_rate)
    print(f"expected peak bin: {expected}")
    if len(tables) == 2:
        direct = tables["power_of_two"].values
        chirp = tables["bluestein"].values
        scale = max(float(direct.max()), 1.0)
        print(f"max |difference| / peak: {np.abs(direct - chirp).max() / scale:.3e}")

    engine = SpectralEngine(args.hop_size)
    print(f"auto strategy: {engine.strategy.name}")


if __name__ == "__main__":
    main()
