"""
Brier scoring of resolved binary forecasts.

Brier score = (p - o)^2 where o is 1 if the outcome happened, else 0.
0 is perfect, 1 is maximally wrong, and always predicting 0.5 scores 0.25.
"""

import math
from collections.abc import Sequence
from enum import Enum

from ..config import FAIR_THRESHOLD, GOOD_THRESHOLD, SUPERFORECASTER_THRESHOLD


class CalibrationTier(str, Enum):
    """Qualitative tier for a (mean) Brier score."""

    SUPERFORECASTER = "superforecaster"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    CalibrationTier.SUPERFORECASTER: "Superforecaster Status",
    CalibrationTier.GOOD: "Good Calibration",
    CalibrationTier.FAIR: "Fair (Better than random)",
    CalibrationTier.POOR: "Poor Calibration",
}


def validate_probability(probability: float, name: str = "probability") -> None:
    """Raise ValueError unless ``probability`` is a finite number in [0, 1]."""
    if isinstance(probability, bool) or not isinstance(probability, (int, float)):
        raise ValueError(f"{name} must be a number, got {probability!r}")
    if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {probability}")


def brier_score(predicted_probability: float, actual_outcome: bool) -> float:
    """
    Score one prediction against its realized outcome.

    Args:
        predicted_probability: Stated probability that the outcome happens
        actual_outcome: Whether it happened

    Returns:
        Brier score in [0, 1]

    Raises:
        ValueError: If the probability is outside [0, 1] or the outcome is
            not a bool

    Example:
        >>> brier_score(0.8, True)
        0.04000000000000001
    """
    validate_probability(predicted_probability, "predicted_probability")
    if not isinstance(actual_outcome, bool):
        raise ValueError(f"actual_outcome must be a bool, got {actual_outcome!r}")
    return (predicted_probability - (1.0 if actual_outcome else 0.0)) ** 2


def calibration_tier(score: float) -> CalibrationTier:
    """Map a Brier score to its tier using the fixed thresholds."""
    if score < SUPERFORECASTER_THRESHOLD:
        return CalibrationTier.SUPERFORECASTER
    if score < GOOD_THRESHOLD:
        return CalibrationTier.GOOD
    if score < FAIR_THRESHOLD:
        return CalibrationTier.FAIR
    return CalibrationTier.POOR


def average_brier(scores: Sequence[float]) -> float | None:
    """Unweighted mean of Brier scores, or None when there are none."""
    if len(scores) == 0:
        return None
    return math.fsum(scores) / len(scores)


class BrierScorer:
    """Stateless service wrapper for Brier scoring."""

    def score(self, predicted_probability: float, actual_outcome: bool) -> float:
        return brier_score(predicted_probability, actual_outcome)

    def tier(self, score: float) -> CalibrationTier:
        return calibration_tier(score)

    def average(self, scores: Sequence[float]) -> float | None:
        return average_brier(scores)
