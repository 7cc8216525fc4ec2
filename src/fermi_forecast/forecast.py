"""
Forecast configuration: target, drivers, and informational metadata.

Unit convention
---------------
The simulated outcome is the product of all driver samples, so its unit is
whatever the drivers multiply out to. ``ForecastConfig.output_scale`` declares
that unit's magnitude (e.g., drivers of "M units" x "$/unit" give an outcome
in millions of dollars). ``target_scale`` declares the magnitude the target is
written in. Both default to millions, matching how targets are usually
entered. The engine never guesses: the target is rescaled only through
``target_in_output_scale()``, from the two declared scales.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .drivers import Driver, driver_from_dict


class TargetMetric(str, Enum):
    """Outcome being forecast."""

    REVENUE = "revenue"
    MARKET_CAP = "market_cap"
    PROFITABILITY = "profitability"


class Scale(float, Enum):
    """Magnitude of a numeric quantity."""

    UNITS = 1.0
    THOUSANDS = 1e3
    MILLIONS = 1e6
    BILLIONS = 1e9


_METRIC_ALIASES = {"marketCap": TargetMetric.MARKET_CAP}

_SCALE_NAMES = {scale.name.lower(): scale for scale in Scale}


def parse_scale(value: "str | Scale") -> Scale:
    """Convert a scale name ("millions") or Scale to Scale."""
    if isinstance(value, Scale):
        return value
    try:
        return _SCALE_NAMES[str(value).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown scale {value!r}. Valid scales: {sorted(_SCALE_NAMES)}"
        ) from None


def parse_metric(value: "str | TargetMetric") -> TargetMetric:
    """Convert a metric name to TargetMetric (accepts ``marketCap``)."""
    if isinstance(value, TargetMetric):
        return value
    if value in _METRIC_ALIASES:
        return _METRIC_ALIASES[value]
    try:
        return TargetMetric(value)
    except ValueError:
        raise ValueError(
            f"Unknown target metric {value!r}. "
            f"Valid metrics: {sorted(m.value for m in TargetMetric)}"
        ) from None


@dataclass(frozen=True)
class BaseRate:
    """Historical reference probability (informational only)."""

    description: str
    probability: float
    source: str

    def __post_init__(self):
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(
                f"base rate probability must be in [0, 1], got {self.probability}"
            )


@dataclass(frozen=True)
class PremortemScenario:
    """Named failure scenario (informational only)."""

    scenario: str
    failure_mode: str


DEFAULT_BASE_RATE = BaseRate(
    description="No base rate provided",
    probability=0.5,
    source="default",
)


@dataclass(frozen=True)
class ForecastConfig:
    """
    A complete forecast: what is predicted, by when, and how it decomposes.

    Attributes:
        ticker: Company ticker (e.g., "NVDA")
        target_metric: Outcome being forecast
        target_value: Threshold the outcome must reach, in ``target_scale``
        target_date: Resolution date (ISO string as supplied by the caller)
        drivers: Multiplicative drivers (order does not affect the result)
        base_rate: Reference probability, not used by the simulation
        premortem: Failure scenarios, not used by the simulation
        target_scale: Magnitude ``target_value`` is written in
        output_scale: Magnitude of the driver product
    """

    ticker: str
    target_metric: TargetMetric
    target_value: float
    target_date: str
    drivers: tuple[Driver, ...]
    base_rate: BaseRate = DEFAULT_BASE_RATE
    premortem: tuple[PremortemScenario, ...] = field(default_factory=tuple)
    target_scale: Scale = Scale.MILLIONS
    output_scale: Scale = Scale.MILLIONS

    def __post_init__(self):
        if not self.ticker:
            raise ValueError("ticker cannot be empty")
        if isinstance(self.target_value, bool) or not isinstance(
            self.target_value, (int, float)
        ):
            raise TypeError(
                f"target_value must be a number, got {type(self.target_value).__name__}"
            )
        if not math.isfinite(self.target_value):
            raise ValueError(f"target_value must be finite, got {self.target_value}")

        object.__setattr__(self, "target_metric", parse_metric(self.target_metric))
        object.__setattr__(self, "target_scale", parse_scale(self.target_scale))
        object.__setattr__(self, "output_scale", parse_scale(self.output_scale))
        object.__setattr__(self, "drivers", tuple(self.drivers))
        object.__setattr__(self, "premortem", tuple(self.premortem))

        if len(self.drivers) == 0:
            raise ValueError("drivers cannot be empty")
        for driver in self.drivers:
            if not isinstance(driver, Driver):
                raise TypeError(f"Expected Driver, got {type(driver).__name__}")

    def target_in_output_scale(self) -> float:
        """
        Express ``target_value`` in the unit of the driver product.

        Example:
            A target of 60 (billions) against drivers that multiply out to
            millions is 60,000 in output units.
        """
        if self.target_scale is self.output_scale:
            return float(self.target_value)
        return self.target_value * (self.target_scale.value / self.output_scale.value)


_REQUIRED_FIELDS = ("ticker", "targetMetric", "targetValue", "targetDate")


def build_forecast_config(data: dict[str, Any]) -> ForecastConfig:
    """
    Build a ForecastConfig from the collaborator dictionary shape.

    Missing base rate and premortem fall back to defaults; drivers may be
    Driver objects or driver dictionaries (see ``driver_from_dict``).

    Args:
        data: Dictionary with keys ``ticker``, ``targetMetric``,
            ``targetValue``, ``targetDate``, ``drivers`` and optionally
            ``baserate``, ``premortem``, ``targetScale``, ``outputScale``

    Returns:
        Validated ForecastConfig

    Raises:
        ValueError: If a required field is missing or any value is invalid
    """
    missing = [key for key in _REQUIRED_FIELDS if data.get(key) in (None, "")]
    if missing:
        raise ValueError(f"Missing required forecast parameters: {missing}")

    drivers = [
        d if isinstance(d, Driver) else driver_from_dict(d)
        for d in data.get("drivers") or []
    ]

    raw_base = data.get("baserate") or data.get("baseRate")
    base_rate = (
        BaseRate(
            description=raw_base.get("description", ""),
            probability=raw_base.get("probability", 0.5),
            source=raw_base.get("source", ""),
        )
        if raw_base
        else DEFAULT_BASE_RATE
    )

    premortem = [
        PremortemScenario(
            scenario=item.get("scenario", ""),
            failure_mode=item.get("failureMode", item.get("failure_mode", "")),
        )
        for item in data.get("premortem") or []
    ]

    return ForecastConfig(
        ticker=data["ticker"],
        target_metric=data["targetMetric"],
        target_value=data["targetValue"],
        target_date=str(data["targetDate"]),
        drivers=tuple(drivers),
        base_rate=base_rate,
        premortem=tuple(premortem),
        target_scale=data.get("targetScale", Scale.MILLIONS),
        output_scale=data.get("outputScale", Scale.MILLIONS),
    )
