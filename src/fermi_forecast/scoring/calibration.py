"""
Calibration analysis and leaderboard ranking over resolved forecasts.

Predicted probabilities are grouped into five fixed bins:

    [0, 0.2), [0.2, 0.4), [0.4, 0.6), [0.6, 0.8), [0.8, 1.0]

For each non-empty bin the mean predicted probability is compared with the
observed frequency of true outcomes. The calibration index is

    1 - mean(|mean_predicted - actual_frequency|)   over non-empty bins

so a perfectly calibrated forecaster scores 1.0. With no resolved forecasts
the index is undefined and reported as None.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import pandas as pd

from ..config import CALIBRATION_BIN_EDGES
from .brier import (
    CalibrationTier,
    average_brier,
    brier_score,
    calibration_tier,
    validate_probability,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Forecast Records
# ============================================================================


@dataclass(frozen=True)
class ResolvedForecast:
    """
    A prediction whose outcome is known. Immutable once created.

    Attributes:
        forecast_id: Identifier of the original forecast
        forecaster_id: Owner of the forecast
        predicted_probability: Probability stated before resolution
        actual_outcome: Whether the target was reached
        brier_score: Derived from the two values above
    """

    forecast_id: str
    forecaster_id: str
    predicted_probability: float
    actual_outcome: bool
    brier_score: float

    def __post_init__(self):
        expected = brier_score(self.predicted_probability, self.actual_outcome)
        if not math.isclose(self.brier_score, expected, abs_tol=1e-12):
            raise ValueError(
                f"brier_score {self.brier_score} does not match "
                f"predicted_probability/actual_outcome (expected {expected})"
            )

    @classmethod
    def create(
        cls,
        forecast_id: str,
        forecaster_id: str,
        predicted_probability: float,
        actual_outcome: bool,
    ) -> "ResolvedForecast":
        """Create a resolved forecast, deriving its Brier score."""
        return cls(
            forecast_id=forecast_id,
            forecaster_id=forecaster_id,
            predicted_probability=predicted_probability,
            actual_outcome=actual_outcome,
            brier_score=brier_score(predicted_probability, actual_outcome),
        )


@dataclass(frozen=True)
class ForecastRecord:
    """
    An open prediction awaiting its resolution date.

    Attributes:
        forecast_id: Identifier of the forecast
        forecaster_id: Owner of the forecast
        predicted_probability: Probability of reaching the target
            (typically ``SimulationResult.probability_above_target``)
        resolution_date: Date the outcome becomes known (ISO string)
        ticker: Company ticker (informational)
    """

    forecast_id: str
    forecaster_id: str
    predicted_probability: float
    resolution_date: str = ""
    ticker: str = ""

    def __post_init__(self):
        validate_probability(self.predicted_probability, "predicted_probability")

    def resolve(self, actual_outcome: bool) -> ResolvedForecast:
        """Record the realized outcome and score the prediction."""
        return ResolvedForecast.create(
            forecast_id=self.forecast_id,
            forecaster_id=self.forecaster_id,
            predicted_probability=self.predicted_probability,
            actual_outcome=actual_outcome,
        )


# ============================================================================
# Calibration
# ============================================================================


@dataclass(frozen=True)
class CalibrationBin:
    """
    Calibration statistics for one probability band.

    ``mean_predicted`` and ``actual_frequency`` are None for empty bins.
    """

    lower: float
    upper: float
    count: int
    mean_predicted: float | None
    actual_frequency: float | None

    @property
    def deviation(self) -> float | None:
        if self.count == 0:
            return None
        return abs(self.mean_predicted - self.actual_frequency)


def _bin_index(probability: float) -> int:
    """Index of the calibration bin holding ``probability``."""
    n_bins = len(CALIBRATION_BIN_EDGES) - 1
    for i in range(n_bins):
        if probability < CALIBRATION_BIN_EDGES[i + 1]:
            return i
    return n_bins - 1  # 1.0 belongs to the last, closed bin


def calibration_bins(resolved: Iterable[ResolvedForecast]) -> list[CalibrationBin]:
    """
    Group resolved forecasts into the five fixed calibration bins.

    Returns:
        One CalibrationBin per band, in ascending order, including empty bins
    """
    n_bins = len(CALIBRATION_BIN_EDGES) - 1
    grouped: list[list[ResolvedForecast]] = [[] for _ in range(n_bins)]
    for forecast in resolved:
        grouped[_bin_index(forecast.predicted_probability)].append(forecast)

    bins = []
    for i, members in enumerate(grouped):
        if members:
            mean_predicted = math.fsum(f.predicted_probability for f in members) / len(members)
            actual_frequency = sum(1 for f in members if f.actual_outcome) / len(members)
        else:
            mean_predicted = None
            actual_frequency = None
        bins.append(
            CalibrationBin(
                lower=CALIBRATION_BIN_EDGES[i],
                upper=CALIBRATION_BIN_EDGES[i + 1],
                count=len(members),
                mean_predicted=mean_predicted,
                actual_frequency=actual_frequency,
            )
        )
    return bins


def calibration_index(resolved: Iterable[ResolvedForecast]) -> float | None:
    """
    Calibration index in [0, 1] (1.0 = perfectly calibrated).

    Returns:
        The index, or None when there are no resolved forecasts
    """
    deviations = [b.deviation for b in calibration_bins(resolved) if b.count > 0]
    if not deviations:
        logger.warning("Calibration index undefined: no resolved forecasts")
        return None
    return 1.0 - math.fsum(deviations) / len(deviations)


def calibration_table(resolved: Iterable[ResolvedForecast]) -> pd.DataFrame:
    """
    Calibration bins as a DataFrame (one row per band, empty bands as NaN).

    Columns: lower, upper, count, mean_predicted, actual_frequency, deviation
    """
    rows = [
        {
            "lower": b.lower,
            "upper": b.upper,
            "count": b.count,
            "mean_predicted": b.mean_predicted,
            "actual_frequency": b.actual_frequency,
            "deviation": b.deviation,
        }
        for b in calibration_bins(resolved)
    ]
    return pd.DataFrame(rows).astype(
        {"mean_predicted": float, "actual_frequency": float, "deviation": float}
    )


# ============================================================================
# Leaderboard
# ============================================================================


@dataclass(frozen=True)
class LeaderboardEntry:
    """
    Per-forecaster aggregate, recomputed on demand.

    Score, index and status are None for forecasters with no resolved
    forecasts.
    """

    forecaster_id: str
    avg_brier_score: float | None
    calibration_index: float | None
    total_forecasts: int
    resolved_forecasts: int
    status: CalibrationTier | None


def _leaderboard_key(entry: LeaderboardEntry) -> tuple:
    # Unrated forecasters sort after every rated one
    unrated = entry.avg_brier_score is None
    return (unrated, entry.avg_brier_score or 0.0, entry.forecaster_id)


def leaderboard(
    forecasts: Iterable[ResolvedForecast | ForecastRecord],
) -> list[LeaderboardEntry]:
    """
    Rank forecasters by mean Brier score (lower is better).

    Open ForecastRecords count toward ``total_forecasts`` only. A forecast
    passed both as its open record and as its resolution is counted once,
    as resolved.

    Args:
        forecasts: Resolved and open forecasts from any number of forecasters

    Returns:
        Entries sorted ascending by ``avg_brier_score``; ties are broken by
        forecaster id and unrated forecasters come last
    """
    by_forecaster: dict[str, dict[str, ResolvedForecast | ForecastRecord]] = {}
    for forecast in forecasts:
        if not isinstance(forecast, (ResolvedForecast, ForecastRecord)):
            raise TypeError(
                f"Expected ResolvedForecast or ForecastRecord, got {type(forecast).__name__}"
            )
        items = by_forecaster.setdefault(forecast.forecaster_id, {})
        previous = items.get(forecast.forecast_id)
        # An open record never hides its resolution
        if isinstance(previous, ResolvedForecast) and isinstance(forecast, ForecastRecord):
            continue
        items[forecast.forecast_id] = forecast

    entries = []
    for forecaster_id, items in by_forecaster.items():
        resolved = [f for f in items.values() if isinstance(f, ResolvedForecast)]
        avg = average_brier([f.brier_score for f in resolved])
        entries.append(
            LeaderboardEntry(
                forecaster_id=forecaster_id,
                avg_brier_score=avg,
                calibration_index=calibration_index(resolved) if resolved else None,
                total_forecasts=len(items),
                resolved_forecasts=len(resolved),
                status=calibration_tier(avg) if avg is not None else None,
            )
        )

    return sorted(entries, key=_leaderboard_key)


def leaderboard_to_frame(entries: Sequence[LeaderboardEntry]) -> pd.DataFrame:
    """
    Leaderboard as a DataFrame with a 1-based ``rank`` column.

    Unrated forecasters have no rank (NaN).
    """
    rows = []
    rank = 0
    for entry in entries:
        if entry.avg_brier_score is not None:
            rank += 1
        rows.append(
            {
                "rank": rank if entry.avg_brier_score is not None else None,
                "forecaster_id": entry.forecaster_id,
                "avg_brier_score": entry.avg_brier_score,
                "calibration_index": entry.calibration_index,
                "total_forecasts": entry.total_forecasts,
                "resolved_forecasts": entry.resolved_forecasts,
                "status": entry.status.value if entry.status is not None else None,
            }
        )
    columns = [
        "rank",
        "forecaster_id",
        "avg_brier_score",
        "calibration_index",
        "total_forecasts",
        "resolved_forecasts",
        "status",
    ]
    return pd.DataFrame(rows, columns=columns)


class CalibrationAnalyzer:
    """Stateless service wrapper for calibration and leaderboard analysis."""

    def calibration_index(self, resolved: Iterable[ResolvedForecast]) -> float | None:
        return calibration_index(resolved)

    def calibration_bins(self, resolved: Iterable[ResolvedForecast]) -> list[CalibrationBin]:
        return calibration_bins(resolved)

    def leaderboard(
        self, forecasts: Iterable[ResolvedForecast | ForecastRecord]
    ) -> list[LeaderboardEntry]:
        return leaderboard(forecasts)
