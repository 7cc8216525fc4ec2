#!/usr/bin/env python3
"""
Print a forecaster leaderboard and calibration table from a CSV export.

Expected columns:
    forecast_id, forecaster_id, predicted_probability, actual_outcome

Rows with an empty actual_outcome are treated as open forecasts.

Usage:
    python scripts/show_leaderboard.py forecasts.csv
"""

import sys
from pathlib import Path

import pandas as pd

from fermi_forecast.logging_config import configure_logging
from fermi_forecast.scoring import (
    ForecastRecord,
    ResolvedForecast,
    calibration_index,
    calibration_table,
    leaderboard,
    leaderboard_to_frame,
)

REQUIRED_COLUMNS = {"forecast_id", "forecaster_id", "predicted_probability", "actual_outcome"}


def load_forecasts(path: Path) -> list[ForecastRecord | ResolvedForecast]:
    """Read forecast rows into open and resolved records."""
    df = pd.read_csv(path, dtype={"forecast_id": str, "forecaster_id": str})
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{path} is missing columns: {sorted(missing)}")

    forecasts = []
    for row in df.itertuples(index=False):
        record = ForecastRecord(
            forecast_id=row.forecast_id,
            forecaster_id=row.forecaster_id,
            predicted_probability=float(row.predicted_probability),
        )
        if pd.isna(row.actual_outcome):
            forecasts.append(record)
        else:
            outcome = str(row.actual_outcome).strip().lower() in ("1", "1.0", "true", "yes")
            forecasts.append(record.resolve(outcome))
    return forecasts


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    configure_logging()
    forecasts = load_forecasts(Path(sys.argv[1]))
    resolved = [f for f in forecasts if isinstance(f, ResolvedForecast)]

    print("=" * 70)
    print("Leaderboard")
    print("=" * 70)
    print(leaderboard_to_frame(leaderboard(forecasts)).to_string(index=False))

    print()
    print("=" * 70)
    print("Calibration (all forecasters)")
    print("=" * 70)
    print(calibration_table(resolved).to_string(index=False))

    index = calibration_index(resolved)
    print(f"\nCalibration index: {'undefined' if index is None else f'{index:.3f}'}")
    print(f"Forecasts: {len(forecasts)} total, {len(resolved)} resolved")


if __name__ == "__main__":
    main()
