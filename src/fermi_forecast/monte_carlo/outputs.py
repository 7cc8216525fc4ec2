"""
Simulation result types and tabular views.

``SimulationResult`` is the value returned to collaborators (rendering layer,
chat actions, APIs). ``to_dict()`` produces the camelCase shape those
collaborators serialize; the pandas helpers give analysis-friendly views.
"""

from dataclasses import dataclass, field, replace
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class HistogramBin:
    """One equal-width histogram bin, identified by its center."""

    bin_center: float
    count: int


@dataclass(frozen=True)
class SimulationResult:
    """
    Summary of a simulated outcome population.

    All values are in the unit of the driver product.

    Attributes:
        p10: 10th percentile (order statistic)
        p50: Median (order statistic)
        p90: 90th percentile (order statistic)
        mean: Population mean
        std_dev: Population standard deviation
        histogram: Ordered bins spanning [min, max]; counts sum to iterations
        iterations: Number of simulated outcomes
        minimum: Smallest simulated outcome
        maximum: Largest simulated outcome
        probability_above_target: Fraction at or above target, None until
            evaluated against a target
    """

    p10: float
    p50: float
    p90: float
    mean: float
    std_dev: float
    histogram: tuple[HistogramBin, ...]
    iterations: int
    minimum: float
    maximum: float
    probability_above_target: float | None = field(default=None)

    def with_probability(self, probability: float) -> "SimulationResult":
        """Return a copy with ``probability_above_target`` set."""
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be in [0, 1], got {probability}")
        return replace(self, probability_above_target=probability)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the collaborator dictionary shape."""
        return {
            "p10": self.p10,
            "p50": self.p50,
            "p90": self.p90,
            "mean": self.mean,
            "stdDev": self.std_dev,
            "probabilityAboveTarget": self.probability_above_target,
            "iterations": self.iterations,
            "min": self.minimum,
            "max": self.maximum,
            "histogram": [
                {"binCenter": b.bin_center, "count": b.count} for b in self.histogram
            ],
        }


# ============================================================================
# DataFrame Views
# ============================================================================


def histogram_to_frame(result: SimulationResult) -> pd.DataFrame:
    """
    Convert a result's histogram to a DataFrame.

    Returns:
        DataFrame with columns:
            - bin_center: Bin midpoint
            - count: Outcomes in the bin
            - fraction: count / iterations
            - cumulative_fraction: Running share of outcomes up to this bin
    """
    df = pd.DataFrame(
        [(b.bin_center, b.count) for b in result.histogram],
        columns=["bin_center", "count"],
    )
    df["fraction"] = df["count"] / result.iterations
    df["cumulative_fraction"] = df["fraction"].cumsum()
    return df


def summary_frame(results: dict[str, SimulationResult]) -> pd.DataFrame:
    """
    Tabulate several results side by side, one row per named run.

    Useful for comparing forecasts (e.g., two tickers, or a base case against
    a stressed driver set).

    Args:
        results: Mapping of run name to SimulationResult

    Returns:
        DataFrame indexed by run name with columns p10, p50, p90, mean,
        std_dev, min, max, iterations, probability_above_target
    """
    rows = [
        {
            "name": name,
            "p10": r.p10,
            "p50": r.p50,
            "p90": r.p90,
            "mean": r.mean,
            "std_dev": r.std_dev,
            "min": r.minimum,
            "max": r.maximum,
            "iterations": r.iterations,
            "probability_above_target": r.probability_above_target,
        }
        for name, r in results.items()
    ]
    columns = [
        "name",
        "p10",
        "p50",
        "p90",
        "mean",
        "std_dev",
        "min",
        "max",
        "iterations",
        "probability_above_target",
    ]
    return pd.DataFrame(rows, columns=columns).set_index("name")
