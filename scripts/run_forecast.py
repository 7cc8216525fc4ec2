#!/usr/bin/env python3
"""
Run a forecast from a JSON configuration file and print its summary.

The JSON file uses the same shape forecast-construction forms produce:

    {
        "ticker": "NVDA",
        "targetMetric": "revenue",
        "targetValue": 60,
        "targetScale": "billions",
        "outputScale": "millions",
        "targetDate": "2026-12-31",
        "drivers": [
            {"name": "GPU units", "distributionType": "triangular",
             "parameters": {"low": 2.0, "mode": 2.5, "high": 3.2}},
            ...
        ]
    }

Usage:
    python scripts/run_forecast.py forecast.json [--iterations 100000]
        [--workers 4] [--seed 42] [--histogram]

With --workers > 1 the run is split across worker processes.
"""

import argparse
import json
import random
import time
from pathlib import Path

from fermi_forecast import build_forecast_config, run_parallel_simulation, success_probability
from fermi_forecast.config import DEFAULT_ITERATIONS
from fermi_forecast.evaluation import run_forecast
from fermi_forecast.logging_config import configure_logging
from fermi_forecast.monte_carlo import histogram_to_frame


def parse_args():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("config", type=Path, help="Forecast JSON file")
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--histogram", action="store_true", help="Print histogram table")
    return parser.parse_args()


def main():
    """Load, simulate, and summarize one forecast."""
    args = parse_args()
    configure_logging()

    with open(args.config, encoding="utf-8") as fh:
        config = build_forecast_config(json.load(fh))

    print("=" * 70)
    print(f"Forecast: {config.ticker} {config.target_metric.value}")
    print("=" * 70)
    print(f"Target: {config.target_value} {config.target_scale.name.lower()}")
    print(f"Resolves: {config.target_date}")
    print(f"Drivers: {', '.join(d.name for d in config.drivers)}")
    print(f"Iterations: {args.iterations}")
    print(f"Workers: {args.workers}")
    print("=" * 70)

    start_time = time.time()

    if args.workers > 1:
        result = run_parallel_simulation(
            config.drivers,
            iterations=args.iterations,
            batch_seed=args.seed,
            n_workers=args.workers,
        )
        target = config.target_in_output_scale()
        result = result.with_probability(success_probability(result, target))
    else:
        rng = random.Random(args.seed)
        result = run_forecast(config, iterations=args.iterations, rng=rng)

    elapsed = time.time() - start_time
    unit = config.output_scale.name.lower()

    print(f"\nP10:  {result.p10:,.2f} {unit}")
    print(f"P50:  {result.p50:,.2f} {unit}")
    print(f"P90:  {result.p90:,.2f} {unit}")
    print(f"Mean: {result.mean:,.2f} {unit} (std dev {result.std_dev:,.2f})")
    print(f"P(outcome >= target): {result.probability_above_target:.1%}")
    print(f"Base rate: {config.base_rate.probability:.1%} ({config.base_rate.source})")

    if args.histogram:
        print()
        print(histogram_to_frame(result).to_string(index=False))

    print("=" * 70)
    print(f"Completed in {elapsed:.2f} s")
    print("=" * 70)


if __name__ == "__main__":
    main()
