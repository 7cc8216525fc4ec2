"""
Driver definitions for Fermi-style forecast decomposition.

A driver is one independent uncertain factor of an outcome. Each driver
declares a distribution kind and a matching parameter record; samples of all
drivers are multiplied together to produce one simulated outcome.

Parameter records validate themselves on construction so that a bad
configuration is rejected before any simulation runs.
"""

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class DistributionKind(str, Enum):
    """Supported driver distributions."""

    TRIANGULAR = "triangular"
    NORMAL = "normal"
    UNIFORM = "uniform"
    BETA = "beta"


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{name} must be a number, got {type(value).__name__}")
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")


# ============================================================================
# Parameter Records
# ============================================================================


@dataclass(frozen=True)
class TriangularParams:
    """
    Triangular distribution parameters.

    Attributes:
        low: Minimum value (inclusive)
        mode: Most likely value
        high: Maximum value (inclusive)
    """

    low: float
    mode: float
    high: float

    def __post_init__(self):
        _require_finite(low=self.low, mode=self.mode, high=self.high)
        if not self.low <= self.mode <= self.high:
            raise ValueError(
                f"triangular parameters must satisfy low <= mode <= high, "
                f"got low={self.low}, mode={self.mode}, high={self.high}"
            )


@dataclass(frozen=True)
class NormalParams:
    """
    Normal distribution parameters.

    Attributes:
        mean: Distribution mean
        std_dev: Standard deviation (>= 0; 0 is a point mass at mean)
    """

    mean: float
    std_dev: float

    def __post_init__(self):
        _require_finite(mean=self.mean, std_dev=self.std_dev)
        if self.std_dev < 0:
            raise ValueError(f"std_dev must be >= 0, got {self.std_dev}")


@dataclass(frozen=True)
class UniformParams:
    """
    Continuous uniform distribution parameters.

    Attributes:
        low: Lower bound (inclusive)
        high: Upper bound
    """

    low: float
    high: float

    def __post_init__(self):
        _require_finite(low=self.low, high=self.high)
        if self.low > self.high:
            raise ValueError(
                f"low ({self.low}) must be <= high ({self.high})"
            )


@dataclass(frozen=True)
class BetaParams:
    """
    Beta distribution shape parameters. Samples lie in [0, 1].

    Attributes:
        alpha: First shape parameter (> 0)
        beta: Second shape parameter (> 0)
    """

    alpha: float
    beta: float

    def __post_init__(self):
        _require_finite(alpha=self.alpha, beta=self.beta)
        if self.alpha <= 0:
            raise ValueError(f"alpha must be > 0, got {self.alpha}")
        if self.beta <= 0:
            raise ValueError(f"beta must be > 0, got {self.beta}")


# Type alias for any parameter record
DriverParams = TriangularParams | NormalParams | UniformParams | BetaParams

PARAMS_BY_KIND: dict[DistributionKind, type] = {
    DistributionKind.TRIANGULAR: TriangularParams,
    DistributionKind.NORMAL: NormalParams,
    DistributionKind.UNIFORM: UniformParams,
    DistributionKind.BETA: BetaParams,
}

# Collaborator field names (camelCase) for each parameter record
_PARAM_FIELDS: dict[DistributionKind, dict[str, str]] = {
    DistributionKind.TRIANGULAR: {"low": "low", "mode": "mode", "high": "high"},
    DistributionKind.NORMAL: {"mean": "mean", "stdDev": "std_dev"},
    DistributionKind.UNIFORM: {"low": "low", "high": "high"},
    DistributionKind.BETA: {"alpha": "alpha", "beta": "beta"},
}


def parse_kind(value: "str | DistributionKind") -> DistributionKind:
    """
    Convert a distribution name to DistributionKind.

    Raises:
        ValueError: If the name is not a supported distribution
    """
    if isinstance(value, DistributionKind):
        return value
    try:
        return DistributionKind(value)
    except ValueError:
        valid = sorted(kind.value for kind in DistributionKind)
        raise ValueError(
            f"Unknown distribution kind {value!r}. Valid kinds: {valid}"
        ) from None


# ============================================================================
# Driver
# ============================================================================


@dataclass(frozen=True)
class Driver:
    """
    One multiplicative factor of a forecast outcome.

    Attributes:
        name: Driver name (e.g., "Units shipped")
        distribution: Distribution kind to sample from
        parameters: Parameter record matching the distribution kind
        description: Free-text description (display only)
        unit: Unit label (display only, e.g., "M units", "$/unit")
    """

    name: str
    distribution: DistributionKind
    parameters: DriverParams
    description: str = ""
    unit: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Driver name cannot be empty")

        kind = parse_kind(self.distribution)
        object.__setattr__(self, "distribution", kind)

        expected = PARAMS_BY_KIND[kind]
        if not isinstance(self.parameters, expected):
            raise TypeError(
                f"Driver '{self.name}' declares {kind.value} distribution but "
                f"parameters are {type(self.parameters).__name__}, "
                f"expected {expected.__name__}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the collaborator dictionary shape."""
        fields = _PARAM_FIELDS[self.distribution]
        params = asdict(self.parameters)
        return {
            "name": self.name,
            "description": self.description,
            "unit": self.unit,
            "distributionType": self.distribution.value,
            "parameters": {key: params[attr] for key, attr in fields.items()},
        }


def driver_from_dict(data: dict[str, Any]) -> Driver:
    """
    Build a Driver from a plain dictionary.

    Accepts the shape produced by forecast-construction collaborators:

        {
            "name": "Units shipped",
            "description": "...",
            "unit": "M units",
            "distributionType": "triangular",
            "parameters": {"low": 80, "mode": 100, "high": 130},
        }

    Parameter keys may be given in camelCase (``stdDev``) or snake_case
    (``std_dev``). Extra parameter keys are ignored.

    Args:
        data: Driver dictionary

    Returns:
        Validated Driver

    Raises:
        ValueError: If the distribution kind is unknown or a required
            parameter is missing or violates its constraints
    """
    name = data.get("name")
    if not name:
        raise ValueError("Driver is missing required field 'name'")

    raw_kind = data.get("distributionType", data.get("distribution"))
    if raw_kind is None:
        raise ValueError(f"Driver '{name}' is missing 'distributionType'")
    kind = parse_kind(raw_kind)

    raw_params = data.get("parameters") or {}
    kwargs = {}
    for key, attr in _PARAM_FIELDS[kind].items():
        if key in raw_params and raw_params[key] is not None:
            kwargs[attr] = raw_params[key]
        elif attr in raw_params and raw_params[attr] is not None:
            kwargs[attr] = raw_params[attr]
        else:
            raise ValueError(
                f"Driver '{name}' ({kind.value}) is missing required parameter '{key}'"
            )

    return Driver(
        name=name,
        distribution=kind,
        parameters=PARAMS_BY_KIND[kind](**kwargs),
        description=data.get("description", ""),
        unit=data.get("unit", ""),
    )


# ============================================================================
# Driver Registry
# ============================================================================


class DriverRegistry:
    """
    Driver templates grouped by sector.

    Registries are plain objects owned by the caller; create one per
    application and pass it where it is needed.

    Example:
        >>> registry = DriverRegistry()
        >>> registry.register_drivers("semiconductors", [units, asp])
        >>> registry.get_drivers("semiconductors")
        [Driver(name='Units shipped', ...), Driver(name='Average selling price', ...)]
    """

    def __init__(self):
        self._drivers: dict[str, list[Driver]] = {}

    def register_drivers(self, sector: str, drivers: list[Driver]) -> None:
        """Register (or replace) the driver templates for a sector."""
        if not sector:
            raise ValueError("sector cannot be empty")
        for driver in drivers:
            if not isinstance(driver, Driver):
                raise TypeError(f"Expected Driver, got {type(driver).__name__}")
        self._drivers[sector] = list(drivers)

    def get_drivers(self, sector: str) -> list[Driver]:
        """Return the driver templates for a sector (empty if unknown)."""
        return list(self._drivers.get(sector, []))

    @property
    def sectors(self) -> list[str]:
        """Registered sector names, in registration order."""
        return list(self._drivers)

    def __contains__(self, sector: str) -> bool:
        return sector in self._drivers

    def __len__(self) -> int:
        return len(self._drivers)


@dataclass(frozen=True)
class SectorConfig:
    """
    Forecasting defaults for one industry sector.

    Attributes:
        name: Sector key (e.g. "saas")
        description: Human-readable sector description
        default_drivers: Names of the drivers usually used to decompose
            outcomes in this sector
        typical_metrics: Metrics usually forecast for companies in the sector
    """

    name: str
    description: str = ""
    default_drivers: tuple[str, ...] = ()
    typical_metrics: tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("sector name cannot be empty")
        # Accept any iterable of names but store immutable tuples
        object.__setattr__(self, "default_drivers", tuple(self.default_drivers))
        object.__setattr__(self, "typical_metrics", tuple(self.typical_metrics))
        for field_name in ("default_drivers", "typical_metrics"):
            for item in getattr(self, field_name):
                if not isinstance(item, str) or not item:
                    raise ValueError(f"{field_name} entries must be non-empty strings, got {item!r}")


class SectorRegistry:
    """
    Sector configurations keyed by sector name.

    Like ``DriverRegistry`` this is owned by the caller. Use
    ``default_sector_registry()`` for a registry preloaded with the built-in
    sectors.
    """

    def __init__(self):
        self._sectors: dict[str, SectorConfig] = {}

    def register_sector(self, sector: SectorConfig) -> None:
        """Register (or replace) a sector configuration under its name."""
        if not isinstance(sector, SectorConfig):
            raise TypeError(f"Expected SectorConfig, got {type(sector).__name__}")
        self._sectors[sector.name] = sector

    def get_sector(self, name: str) -> SectorConfig | None:
        """Return the configuration for a sector, or None if unknown."""
        return self._sectors.get(name)

    def all_sectors(self) -> list[SectorConfig]:
        """All registered sectors, in registration order."""
        return list(self._sectors.values())

    def __contains__(self, name: str) -> bool:
        return name in self._sectors

    def __len__(self) -> int:
        return len(self._sectors)


DEFAULT_SECTORS = (
    SectorConfig(
        name="space",
        description="Space & Aerospace companies",
        default_drivers=("subscriber_count", "arpu", "service_availability"),
        typical_metrics=("revenue", "marketCap"),
    ),
    SectorConfig(
        name="saas",
        description="Software as a Service companies",
        default_drivers=("arr", "retention", "expansion"),
        typical_metrics=("revenue", "arr", "profitability"),
    ),
    SectorConfig(
        name="fintech",
        description="Financial Technology companies",
        default_drivers=("transaction_volume", "take_rate", "user_growth"),
        typical_metrics=("revenue", "profitability"),
    ),
)


def default_sector_registry() -> SectorRegistry:
    """Create a new registry holding the built-in space, saas and fintech sectors."""
    registry = SectorRegistry()
    for sector in DEFAULT_SECTORS:
        registry.register_sector(sector)
    return registry
