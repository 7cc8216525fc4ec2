"""
Monte Carlo simulation of Fermi-decomposed forecasts.

Public API:
    simulate: Run a simulation of the driver product
    MonteCarloEngine: Service wrapper with an injected random source
    DistributionSampler: Per-driver random draws
    SimulationResult: Percentiles, moments and histogram of a run
    run_parallel_simulation: Split a run across worker processes
"""

from .engine import (
    MonteCarloEngine,
    compute_histogram,
    draw_population,
    percentile,
    simulate,
    summarize_population,
)
from .executor import Moments, merge_moments, run_parallel_simulation
from .outputs import (
    HistogramBin,
    SimulationResult,
    histogram_to_frame,
    summary_frame,
)
from .sampler import (
    DistributionSampler,
    sample_beta,
    sample_driver,
    sample_normal,
    sample_triangular,
    sample_uniform,
)

__all__ = [
    # Sampling
    "DistributionSampler",
    "sample_driver",
    "sample_triangular",
    "sample_normal",
    "sample_uniform",
    "sample_beta",
    # Simulation
    "MonteCarloEngine",
    "simulate",
    "draw_population",
    "summarize_population",
    "compute_histogram",
    "percentile",
    # Parallel execution
    "run_parallel_simulation",
    "Moments",
    "merge_moments",
    # Results
    "SimulationResult",
    "HistogramBin",
    "histogram_to_frame",
    "summary_frame",
]
