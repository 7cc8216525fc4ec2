"""
Fermi Forecast - probabilistic forecasting of company outcomes.

This package provides utilities for:
- Defining forecast drivers and their distributions
- Monte Carlo simulation of the driver product (serial or parallel)
- Probability that an outcome reaches its target
- Brier scoring of resolved forecasts
- Calibration analysis and forecaster leaderboards
"""

from .drivers import (
    BetaParams,
    DistributionKind,
    Driver,
    DriverRegistry,
    NormalParams,
    SectorConfig,
    SectorRegistry,
    TriangularParams,
    UniformParams,
    default_sector_registry,
    driver_from_dict,
)
from .evaluation import ForecastEvaluator, run_forecast, success_probability
from .forecast import (
    BaseRate,
    ForecastConfig,
    PremortemScenario,
    Scale,
    TargetMetric,
    build_forecast_config,
)
from .monte_carlo import (
    DistributionSampler,
    MonteCarloEngine,
    SimulationResult,
    run_parallel_simulation,
    simulate,
)
from .scoring import (
    BrierScorer,
    CalibrationAnalyzer,
    CalibrationTier,
    ForecastRecord,
    LeaderboardEntry,
    ResolvedForecast,
    brier_score,
    calibration_index,
    leaderboard,
)

__version__ = "0.1.0"

__all__ = [
    "DistributionKind",
    "TriangularParams",
    "NormalParams",
    "UniformParams",
    "BetaParams",
    "Driver",
    "DriverRegistry",
    "SectorConfig",
    "SectorRegistry",
    "default_sector_registry",
    "driver_from_dict",
    "TargetMetric",
    "Scale",
    "BaseRate",
    "PremortemScenario",
    "ForecastConfig",
    "build_forecast_config",
    "DistributionSampler",
    "MonteCarloEngine",
    "SimulationResult",
    "simulate",
    "run_parallel_simulation",
    "ForecastEvaluator",
    "run_forecast",
    "success_probability",
    "BrierScorer",
    "CalibrationAnalyzer",
    "CalibrationTier",
    "ForecastRecord",
    "ResolvedForecast",
    "LeaderboardEntry",
    "brier_score",
    "calibration_index",
    "leaderboard",
]
