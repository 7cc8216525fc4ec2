"""
Success probability of a forecast against its target.

The target must be in the same unit as the driver product. When evaluating a
full ForecastConfig, the target is rescaled with
``ForecastConfig.target_in_output_scale()``; when calling
``success_probability`` directly, the caller is responsible for the unit.
"""

import logging
import random

from .config import DEFAULT_BIN_COUNT, DEFAULT_ITERATIONS
from .forecast import ForecastConfig
from .monte_carlo.engine import simulate
from .monte_carlo.outputs import SimulationResult

logger = logging.getLogger(__name__)


def success_probability(result: SimulationResult, target_value: float) -> float:
    """
    Fraction of simulated outcomes at or above ``target_value``.

    Counted from the histogram: every bin whose center is >= target counts in
    full.

    Args:
        result: Completed simulation
        target_value: Threshold in the unit of the driver product

    Returns:
        Probability in [0, 1]
    """
    if result.iterations <= 0:
        raise ValueError("result has no iterations")
    above = sum(b.count for b in result.histogram if b.bin_center >= target_value)
    return above / result.iterations


def run_forecast(
    config: ForecastConfig,
    iterations: int = DEFAULT_ITERATIONS,
    rng: random.Random | None = None,
    bin_count: int = DEFAULT_BIN_COUNT,
) -> SimulationResult:
    """
    Simulate a forecast and evaluate it against its target.

    Args:
        config: Validated forecast configuration
        iterations: Monte Carlo iterations
        rng: Random number generator (None = unseeded)
        bin_count: Histogram bins

    Returns:
        SimulationResult with ``probability_above_target`` set
    """
    if not isinstance(config, ForecastConfig):
        raise TypeError(f"Expected ForecastConfig, got {type(config).__name__}")

    result = simulate(config.drivers, iterations, rng=rng, bin_count=bin_count)
    target = config.target_in_output_scale()
    probability = success_probability(result, target)

    logger.debug(
        "%s %s >= %s (output units %s): p=%.3f",
        config.ticker,
        config.target_metric.value,
        target,
        config.output_scale.name.lower(),
        probability,
    )
    return result.with_probability(probability)


class ForecastEvaluator:
    """
    Evaluates forecasts with an injected random source.

    Example:
        >>> evaluator = ForecastEvaluator(rng=random.Random(42))
        >>> evaluator.run(config).probability_above_target
        0.6312
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        iterations: int = DEFAULT_ITERATIONS,
        bin_count: int = DEFAULT_BIN_COUNT,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.iterations = iterations
        self.bin_count = bin_count

    def success_probability(self, result: SimulationResult, target_value: float) -> float:
        return success_probability(result, target_value)

    def run(self, config: ForecastConfig) -> SimulationResult:
        return run_forecast(
            config, self.iterations, rng=self.rng, bin_count=self.bin_count
        )
