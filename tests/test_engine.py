"""
Unit tests for the Monte Carlo engine.

Tests percentile order statistics, moments, histogram construction, and
input validation.
"""

import math
import random

import pytest

from fermi_forecast.drivers import (
    DistributionKind,
    Driver,
    NormalParams,
    TriangularParams,
    UniformParams,
)
from fermi_forecast.monte_carlo import (
    HistogramBin,
    MonteCarloEngine,
    compute_histogram,
    draw_population,
    percentile,
    simulate,
    summarize_population,
)


@pytest.fixture
def revenue_drivers():
    """Units x price x share, all with real spread."""
    return [
        Driver("Units", DistributionKind.TRIANGULAR, TriangularParams(80, 100, 130)),
        Driver("Price", DistributionKind.NORMAL, NormalParams(2.0, 0.2)),
        Driver("Share", DistributionKind.UNIFORM, UniformParams(0.6, 0.9)),
    ]


@pytest.fixture
def point_drivers():
    return [
        Driver("Units", DistributionKind.TRIANGULAR, TriangularParams(100, 100, 100)),
        Driver("Price", DistributionKind.TRIANGULAR, TriangularParams(2, 2, 2)),
    ]


class TestPercentile:
    def test_order_statistics(self):
        values = list(range(10))
        assert percentile(values, 0.1) == 1
        assert percentile(values, 0.5) == 5
        assert percentile(values, 0.9) == 9

    def test_index_clamped(self):
        assert percentile([1.0, 2.0, 3.0], 1.0) == 3.0

    def test_single_value(self):
        assert percentile([4.2], 0.9) == 4.2

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty population"):
            percentile([], 0.5)


class TestComputeHistogram:
    def test_bin_centers_and_counts(self):
        bins = compute_histogram([0.0, 10.0], bin_count=5)
        assert [b.bin_center for b in bins] == pytest.approx([1.0, 3.0, 5.0, 7.0, 9.0])
        assert [b.count for b in bins] == [1, 0, 0, 0, 1]

    def test_max_value_in_last_bin(self):
        bins = compute_histogram([0.0, 0.5, 1.0], bin_count=2)
        assert [b.count for b in bins] == [1, 2]

    def test_degenerate_range_single_bin(self):
        bins = compute_histogram([3.0] * 25, bin_count=50)
        assert bins == [HistogramBin(bin_center=3.0, count=25)]

    def test_counts_sum_to_population(self):
        rng = random.Random(3)
        values = [rng.gauss(0, 1) for _ in range(1234)]
        bins = compute_histogram(values, bin_count=17)
        assert len(bins) == 17
        assert sum(b.count for b in bins) == 1234

    def test_explicit_range(self):
        bins = compute_histogram([1.0, 2.0], bin_count=4, lo=0.0, hi=4.0)
        assert [b.count for b in bins] == [0, 1, 1, 0]

    def test_value_outside_range_raises(self):
        with pytest.raises(ValueError, match="outside histogram range"):
            compute_histogram([5.0], bin_count=4, lo=0.0, hi=4.0)

    @pytest.mark.parametrize("bin_count", [0, -1, 2.5, True])
    def test_invalid_bin_count_raises(self, bin_count):
        with pytest.raises(ValueError, match="bin_count must be a positive integer"):
            compute_histogram([1.0, 2.0], bin_count=bin_count)

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty population"):
            compute_histogram([], bin_count=5)


class TestSummarizePopulation:
    def test_moments_are_population_statistics(self):
        result = summarize_population(list(range(10)), bin_count=5)
        assert result.mean == pytest.approx(4.5)
        assert result.std_dev == pytest.approx(math.sqrt(8.25))
        assert (result.p10, result.p50, result.p90) == (1, 5, 9)
        assert (result.minimum, result.maximum) == (0, 9)
        assert result.iterations == 10

    def test_order_independent(self):
        values = [5.0, 1.0, 3.0, 2.0, 4.0]
        assert summarize_population(values, 3) == summarize_population(sorted(values), 3)

    def test_probability_unset(self):
        assert summarize_population([1.0, 2.0]).probability_above_target is None

    @pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
    def test_non_finite_outcome_raises(self, bad):
        with pytest.raises(ValueError, match="non-finite"):
            summarize_population([1.0, bad, 2.0])

    def test_moment_overflow_raises(self):
        with pytest.raises(ValueError, match="overflowed"):
            summarize_population([-1e200, 1e200])


class TestSimulate:
    def test_percentiles_ordered_and_within_range(self, revenue_drivers):
        result = simulate(revenue_drivers, iterations=5000, rng=random.Random(11))
        assert result.p10 <= result.p50 <= result.p90
        assert result.minimum <= result.p10
        assert result.p90 <= result.maximum

    def test_histogram_counts_sum_to_iterations(self, revenue_drivers):
        result = simulate(revenue_drivers, iterations=3333, rng=random.Random(5))
        assert sum(b.count for b in result.histogram) == 3333
        assert len(result.histogram) == 50

    def test_custom_bin_count(self, revenue_drivers):
        result = simulate(revenue_drivers, 1000, rng=random.Random(5), bin_count=20)
        assert len(result.histogram) == 20

    def test_point_mass_drivers(self, point_drivers):
        result = simulate(point_drivers, iterations=1000, rng=random.Random(1))
        assert result.p10 == result.p50 == result.p90 == 200
        assert result.std_dev == 0
        assert result.histogram == (HistogramBin(bin_center=200, count=1000),)

    def test_drivers_multiply(self):
        drivers = [
            Driver("a", DistributionKind.UNIFORM, UniformParams(3.0, 3.0)),
            Driver("b", DistributionKind.UNIFORM, UniformParams(0.5, 0.5)),
            Driver("c", DistributionKind.UNIFORM, UniformParams(4.0, 4.0)),
        ]
        assert simulate(drivers, 10, rng=random.Random(0)).mean == 6.0

    def test_seeded_runs_reproducible(self, revenue_drivers):
        first = simulate(revenue_drivers, 2000, rng=random.Random(99))
        second = simulate(revenue_drivers, 2000, rng=random.Random(99))
        assert first == second

    def test_unseeded_run(self, revenue_drivers):
        result = simulate(revenue_drivers, iterations=100)
        assert result.iterations == 100

    @pytest.mark.parametrize("iterations", [0, -10, 2.5, "100", True])
    def test_invalid_iterations_raise(self, revenue_drivers, iterations):
        with pytest.raises(ValueError, match="iterations must be"):
            simulate(revenue_drivers, iterations=iterations)

    def test_empty_drivers_raise(self):
        with pytest.raises(ValueError, match="drivers cannot be empty"):
            simulate([], iterations=10)

    def test_overflowing_product_raises(self):
        drivers = [Driver("u", DistributionKind.UNIFORM, UniformParams(-1e308, 1e308))]
        with pytest.raises(ValueError, match="non-finite"):
            simulate(drivers, 100, rng=random.Random(0))

    def test_product_of_large_drivers_raises(self):
        drivers = [
            Driver("a", DistributionKind.UNIFORM, UniformParams(1e200, 1e200)),
            Driver("b", DistributionKind.UNIFORM, UniformParams(1e200, 1e200)),
        ]
        with pytest.raises(ValueError, match="non-finite"):
            simulate(drivers, 10, rng=random.Random(0))

    def test_non_driver_raises(self):
        with pytest.raises(TypeError, match="Expected Driver"):
            draw_population([{"name": "x"}], 10, random.Random(0))


class TestMonteCarloEngine:
    def test_engine_matches_function(self, revenue_drivers):
        engine = MonteCarloEngine(rng=random.Random(8), bin_count=10)
        expected = simulate(revenue_drivers, 500, rng=random.Random(8), bin_count=10)
        assert engine.simulate(revenue_drivers, 500) == expected

    def test_engine_rng_advances_between_calls(self, revenue_drivers):
        engine = MonteCarloEngine(rng=random.Random(8))
        assert engine.simulate(revenue_drivers, 200) != engine.simulate(revenue_drivers, 200)
