"""
Monte Carlo engine for Fermi-decomposed forecasts.

Each iteration draws one sample per driver and multiplies them:

    outcome = driver_1 x driver_2 x ... x driver_n

The population of outcomes is summarized with order-statistic percentiles
(no interpolation), the population mean and standard deviation, and an
equal-width histogram over the observed range.

The engine has no side effects and holds no state between calls. Results are
reproducible only when the caller passes an identically seeded ``rng``.
"""

import logging
import math
import random
from collections.abc import Sequence

from ..config import DEFAULT_BIN_COUNT, DEFAULT_ITERATIONS, PERCENTILES
from ..drivers import Driver
from .outputs import HistogramBin, SimulationResult
from .sampler import sample_driver

logger = logging.getLogger(__name__)


def validate_iterations(iterations: int) -> None:
    """Raise ValueError unless ``iterations`` is a positive integer."""
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise ValueError(
            f"iterations must be a positive integer, got {iterations!r}"
        )
    if iterations <= 0:
        raise ValueError(f"iterations must be > 0, got {iterations}")


def _validate_drivers(drivers: Sequence[Driver]) -> None:
    if len(drivers) == 0:
        raise ValueError("drivers cannot be empty")
    for driver in drivers:
        if not isinstance(driver, Driver):
            raise TypeError(f"Expected Driver, got {type(driver).__name__}")


# ============================================================================
# Sampling
# ============================================================================


def draw_population(
    drivers: Sequence[Driver],
    iterations: int,
    rng: random.Random,
) -> list[float]:
    """
    Draw ``iterations`` outcomes, each the product of one sample per driver.

    Args:
        drivers: Validated drivers
        iterations: Number of outcomes to draw
        rng: Random number generator

    Returns:
        Unsorted list of simulated outcomes
    """
    _validate_drivers(drivers)
    validate_iterations(iterations)

    population = []
    for _ in range(iterations):
        value = 1.0
        for driver in drivers:
            value *= sample_driver(driver, rng)
        population.append(value)
    return population


# ============================================================================
# Summary Statistics
# ============================================================================


def percentile(sorted_values: Sequence[float], q: float) -> float:
    """
    Order-statistic percentile: ``sorted_values[floor(q * n)]``.

    The index is clamped to ``n - 1`` so ``q = 1.0`` returns the maximum.
    """
    n = len(sorted_values)
    if n == 0:
        raise ValueError("cannot take a percentile of an empty population")
    index = min(int(math.floor(q * n)), n - 1)
    return sorted_values[index]


def compute_histogram(
    values: Sequence[float],
    bin_count: int = DEFAULT_BIN_COUNT,
    lo: float | None = None,
    hi: float | None = None,
) -> list[HistogramBin]:
    """
    Count values into equal-width bins spanning [lo, hi].

    ``lo``/``hi`` default to the min/max of ``values``. Bin ``i`` is centered
    at ``lo + (i + 0.5) * width``; the last bin includes ``hi``. When
    ``lo == hi`` all values fall into a single bin centered at ``lo``.

    Args:
        values: Population to bin
        bin_count: Number of bins (> 0)
        lo: Lower edge of the first bin
        hi: Upper edge of the last bin

    Returns:
        Ordered list of HistogramBin whose counts sum to ``len(values)``

    Raises:
        ValueError: If values are empty, bin_count is not positive, the
            range is not finite, or a value lies outside [lo, hi]
    """
    if len(values) == 0:
        raise ValueError("cannot build a histogram of an empty population")
    if isinstance(bin_count, bool) or not isinstance(bin_count, int) or bin_count <= 0:
        raise ValueError(f"bin_count must be a positive integer, got {bin_count!r}")

    lo = min(values) if lo is None else lo
    hi = max(values) if hi is None else hi
    if lo > hi:
        raise ValueError(f"lo ({lo}) must be <= hi ({hi})")

    if lo == hi:
        if any(v != lo for v in values):
            raise ValueError(f"values fall outside the degenerate range [{lo}, {hi}]")
        return [HistogramBin(bin_center=lo, count=len(values))]

    width = (hi - lo) / bin_count
    if not math.isfinite(width):
        raise ValueError(f"histogram range [{lo}, {hi}] is not finite")
    counts = [0] * bin_count
    for v in values:
        if v < lo or v > hi:
            raise ValueError(f"value {v} outside histogram range [{lo}, {hi}]")
        index = min(int((v - lo) / width), bin_count - 1)
        counts[index] += 1

    return [
        HistogramBin(bin_center=lo + (i + 0.5) * width, count=count)
        for i, count in enumerate(counts)
    ]


def summarize_population(
    values: Sequence[float],
    bin_count: int = DEFAULT_BIN_COUNT,
) -> SimulationResult:
    """
    Summarize a full outcome population.

    Percentiles require the complete population; callers that draw in
    parallel must concatenate partial populations before calling this.

    Args:
        values: All simulated outcomes (any order)
        bin_count: Number of histogram bins

    Returns:
        SimulationResult with ``probability_above_target`` unset

    Raises:
        ValueError: If values are empty or any outcome (or its moments)
            is not finite
    """
    if len(values) == 0:
        raise ValueError("cannot summarize an empty population")

    if not all(math.isfinite(v) for v in values):
        raise ValueError("population contains non-finite outcomes; driver product overflowed")

    ordered = sorted(values)
    n = len(ordered)

    try:
        mean = math.fsum(ordered) / n
        variance = math.fsum((v - mean) ** 2 for v in ordered) / n
    except OverflowError as exc:
        raise ValueError(f"population moments overflowed: {exc}") from exc
    p10, p50, p90 = (percentile(ordered, q) for q in PERCENTILES)

    return SimulationResult(
        p10=p10,
        p50=p50,
        p90=p90,
        mean=mean,
        std_dev=math.sqrt(variance),
        histogram=tuple(compute_histogram(ordered, bin_count)),
        iterations=n,
        minimum=ordered[0],
        maximum=ordered[-1],
    )


# ============================================================================
# Entry Points
# ============================================================================


def simulate(
    drivers: Sequence[Driver],
    iterations: int = DEFAULT_ITERATIONS,
    rng: random.Random | None = None,
    bin_count: int = DEFAULT_BIN_COUNT,
) -> SimulationResult:
    """
    Run a Monte Carlo simulation of the driver product.

    Args:
        drivers: Drivers to multiply together
        iterations: Number of Monte Carlo iterations (default 10,000)
        rng: Random number generator; an unseeded one is created if None
        bin_count: Number of histogram bins (default 50)

    Returns:
        SimulationResult (``probability_above_target`` is None; see
        ``fermi_forecast.evaluation``)

    Raises:
        ValueError: If iterations is not a positive integer, drivers is empty,
            or the driver product overflows to a non-finite value
        TypeError: If drivers contains something other than Driver

    Example:
        >>> result = simulate([units, price], iterations=10_000, rng=random.Random(7))
        >>> result.p10 <= result.p50 <= result.p90
        True
    """
    if rng is None:
        rng = random.Random()

    population = draw_population(drivers, iterations, rng)
    logger.debug(
        "Simulated %d drivers x %d iterations", len(drivers), iterations
    )
    return summarize_population(population, bin_count)


class MonteCarloEngine:
    """
    Service wrapper around ``simulate`` with a fixed random source.

    Args:
        rng: Random number generator shared across calls (None = unseeded)
        bin_count: Histogram bins for every result
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        bin_count: int = DEFAULT_BIN_COUNT,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.bin_count = bin_count

    def simulate(
        self,
        drivers: Sequence[Driver],
        iterations: int = DEFAULT_ITERATIONS,
    ) -> SimulationResult:
        return simulate(drivers, iterations, rng=self.rng, bin_count=self.bin_count)
