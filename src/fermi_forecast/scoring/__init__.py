"""
Scoring of resolved forecasts.

Public API:
    brier_score: Squared error of one prediction
    calibration_tier: Qualitative tier for a Brier score
    ForecastRecord / ResolvedForecast: Open and resolved predictions
    calibration_index: Calibration across five probability bins
    leaderboard: Forecasters ranked by mean Brier score
"""

from .brier import (
    BrierScorer,
    CalibrationTier,
    average_brier,
    brier_score,
    calibration_tier,
)
from .calibration import (
    CalibrationAnalyzer,
    CalibrationBin,
    ForecastRecord,
    LeaderboardEntry,
    ResolvedForecast,
    calibration_bins,
    calibration_index,
    calibration_table,
    leaderboard,
    leaderboard_to_frame,
)

__all__ = [
    # Brier scoring
    "BrierScorer",
    "CalibrationTier",
    "brier_score",
    "calibration_tier",
    "average_brier",
    # Records
    "ForecastRecord",
    "ResolvedForecast",
    # Calibration
    "CalibrationAnalyzer",
    "CalibrationBin",
    "calibration_bins",
    "calibration_index",
    "calibration_table",
    # Leaderboard
    "LeaderboardEntry",
    "leaderboard",
    "leaderboard_to_frame",
]
