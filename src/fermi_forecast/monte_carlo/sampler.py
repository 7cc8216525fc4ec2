"""
Random draws from driver distributions.

Every sampler takes an injected ``random.Random`` so that runs are
reproducible when the caller seeds it. Draws are independent across drivers
and iterations; no correlation structure is modeled.
"""

import math
import random

from ..drivers import (
    BetaParams,
    DistributionKind,
    Driver,
    NormalParams,
    TriangularParams,
    UniformParams,
)


def sample_triangular(low: float, mode: float, high: float, rng: random.Random) -> float:
    """
    Draw from a triangular distribution by inverse CDF.

    A zero-width range (``low == high``) is a point mass and returns ``low``.
    """
    if high == low:
        return low

    u = rng.random()
    span = high - low
    f = (mode - low) / span
    if u < f:
        return low + math.sqrt(u * span * (mode - low))
    return high - math.sqrt((1.0 - u) * span * (high - mode))


def sample_normal(mean: float, std_dev: float, rng: random.Random) -> float:
    """
    Draw from a normal distribution with the Box-Muller transform.

    ``u1`` is taken from (0, 1] so ``log(u1)`` is always defined.
    """
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mean + z * std_dev


def sample_uniform(low: float, high: float, rng: random.Random) -> float:
    """Draw from a continuous uniform distribution on [low, high)."""
    return low + rng.random() * (high - low)


def sample_beta(alpha: float, beta: float, rng: random.Random) -> float:
    """
    Draw from Beta(alpha, beta) on [0, 1].

    Uses the ratio of two Gamma draws, X / (X + Y) with X ~ Gamma(alpha) and
    Y ~ Gamma(beta).
    """
    return rng.betavariate(alpha, beta)


def sample_driver(driver: Driver, rng: random.Random) -> float:
    """
    Draw one value for a driver.

    Args:
        driver: Validated driver
        rng: Random number generator (seed it for reproducibility)

    Returns:
        Sampled value

    Raises:
        ValueError: If the driver declares an unsupported distribution
    """
    params = driver.parameters
    kind = driver.distribution

    if kind is DistributionKind.TRIANGULAR and isinstance(params, TriangularParams):
        return sample_triangular(params.low, params.mode, params.high, rng)
    elif kind is DistributionKind.NORMAL and isinstance(params, NormalParams):
        return sample_normal(params.mean, params.std_dev, rng)
    elif kind is DistributionKind.UNIFORM and isinstance(params, UniformParams):
        return sample_uniform(params.low, params.high, rng)
    elif kind is DistributionKind.BETA and isinstance(params, BetaParams):
        return sample_beta(params.alpha, params.beta, rng)
    else:
        raise ValueError(
            f"Unsupported distribution for driver '{driver.name}': {kind!r} "
            f"with {type(params).__name__}"
        )


class DistributionSampler:
    """
    Draws driver samples from an injected random source.

    Holds no state besides the random generator it was given.

    Example:
        >>> sampler = DistributionSampler(random.Random(42))
        >>> sampler.draw(driver)
        101.7...
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def draw(self, driver: Driver) -> float:
        """Draw one value for ``driver``."""
        return sample_driver(driver, self.rng)
