"""
Parallel execution of large Monte Carlo simulations.

Iterations are independent, so a run can be split into chunks drawn by
worker processes. Chunk seeds are derived from a single batch seed so a
parallel run is reproducible for a given (batch_seed, n_workers) pair.

Merging rules:
- Populations are concatenated and summarized once, so percentiles use the
  full sorted population and the histogram uses the common [min, max] range.
- Moments can also be merged from partial summaries with ``merge_moments``.
"""

import logging
import math
import random
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

from ..config import DEFAULT_BIN_COUNT, DEFAULT_ITERATIONS, DEFAULT_N_WORKERS
from ..drivers import Driver
from .engine import draw_population, summarize_population, validate_iterations
from .outputs import SimulationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Moments:
    """
    Running moments of a partial population.

    Attributes:
        count: Number of values
        mean: Mean of the values
        m2: Sum of squared deviations from the mean
    """

    count: int
    mean: float
    m2: float

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "Moments":
        n = len(values)
        if n == 0:
            return cls(0, 0.0, 0.0)
        mean = math.fsum(values) / n
        return cls(n, mean, math.fsum((v - mean) ** 2 for v in values))

    @property
    def std_dev(self) -> float:
        """Population standard deviation."""
        return math.sqrt(self.m2 / self.count) if self.count else 0.0


def merge_moments(a: Moments, b: Moments) -> Moments:
    """
    Combine two partial summaries (Chan et al. parallel variance update).

    Example:
        >>> merged = merge_moments(Moments.from_values(xs), Moments.from_values(ys))
        >>> merged.mean  # equals the mean of xs + ys
    """
    if a.count == 0:
        return b
    if b.count == 0:
        return a
    count = a.count + b.count
    delta = b.mean - a.mean
    mean = a.mean + delta * b.count / count
    m2 = a.m2 + b.m2 + delta**2 * a.count * b.count / count
    return Moments(count, mean, m2)


def split_iterations(iterations: int, n_chunks: int) -> list[int]:
    """Split ``iterations`` into ``n_chunks`` near-equal positive sizes."""
    validate_iterations(iterations)
    if n_chunks <= 0:
        raise ValueError(f"n_chunks must be > 0, got {n_chunks}")
    n_chunks = min(n_chunks, iterations)
    base, extra = divmod(iterations, n_chunks)
    return [base + (1 if i < extra else 0) for i in range(n_chunks)]


def generate_chunk_seeds(batch_seed: int, n_chunks: int) -> list[int]:
    """Derive one seed per chunk from the batch seed."""
    rng = random.Random(batch_seed)
    return [rng.randint(1, 2**31 - 1) for _ in range(n_chunks)]


def execute_chunk(
    drivers: Sequence[Driver],
    iterations: int,
    seed: int,
) -> list[float]:
    """
    Draw one chunk of outcomes. Called by worker processes.

    Returns:
        Unsorted outcome population for this chunk
    """
    return draw_population(drivers, iterations, random.Random(seed))


def run_parallel_simulation(
    drivers: Sequence[Driver],
    iterations: int = DEFAULT_ITERATIONS,
    batch_seed: int | None = None,
    n_workers: int = DEFAULT_N_WORKERS,
    bin_count: int = DEFAULT_BIN_COUNT,
    progress_callback: Callable[[int, int], None] | None = None,
) -> SimulationResult:
    """
    Run a simulation across worker processes and merge the results.

    Args:
        drivers: Drivers to multiply together
        iterations: Total iterations across all workers
        batch_seed: Seed for chunk seeds (None = nondeterministic)
        n_workers: Number of worker processes
        bin_count: Histogram bins for the merged result
        progress_callback: Optional callback(completed_chunks, total_chunks)

    Returns:
        SimulationResult over the full merged population

    Raises:
        ValueError: If iterations or n_workers is invalid
        Exception: Any worker exception is re-raised; no partial result is
            returned
    """
    validate_iterations(iterations)
    if n_workers <= 0:
        raise ValueError(f"n_workers must be > 0, got {n_workers}")
    if len(drivers) == 0:
        raise ValueError("drivers cannot be empty")

    if batch_seed is None:
        batch_seed = random.SystemRandom().randint(1, 2**31 - 1)

    chunk_sizes = split_iterations(iterations, n_workers)
    seeds = generate_chunk_seeds(batch_seed, len(chunk_sizes))

    logger.info(
        "Running %d iterations in %d chunks (batch_seed=%d, workers=%d)",
        iterations,
        len(chunk_sizes),
        batch_seed,
        n_workers,
    )

    populations: list[list[float] | None] = [None] * len(chunk_sizes)
    completed = 0

    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        future_to_chunk = {
            executor.submit(execute_chunk, tuple(drivers), size, seed): index
            for index, (size, seed) in enumerate(zip(chunk_sizes, seeds))
        }

        for future in as_completed(future_to_chunk):
            index = future_to_chunk[future]
            populations[index] = future.result()
            completed += 1
            logger.debug(
                "[%d/%d] chunk %d complete (%d values)",
                completed,
                len(chunk_sizes),
                index,
                len(populations[index]),
            )
            if progress_callback:
                progress_callback(completed, len(chunk_sizes))

    # Concatenate in chunk order so the merged population is deterministic
    merged = [value for population in populations for value in population]
    result = summarize_population(merged, bin_count)

    logger.info(
        "Parallel simulation complete: n=%d p50=%.4g mean=%.4g",
        result.iterations,
        result.p50,
        result.mean,
    )
    return result
