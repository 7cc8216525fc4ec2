"""
Unit tests for distribution samplers.

Uses seeded generators so every statistical check is deterministic.
"""

import random
import statistics

import pytest

from fermi_forecast.drivers import (
    BetaParams,
    DistributionKind,
    Driver,
    NormalParams,
    TriangularParams,
    UniformParams,
)
from fermi_forecast.monte_carlo.sampler import (
    DistributionSampler,
    sample_beta,
    sample_driver,
    sample_normal,
    sample_triangular,
    sample_uniform,
)


class ZeroRandom(random.Random):
    """Generator whose uniform draws are always 0.0."""

    def random(self):
        return 0.0


@pytest.fixture
def rng():
    return random.Random(42)


class TestTriangular:
    def test_point_mass_returns_value(self, rng):
        samples = [sample_triangular(7.5, 7.5, 7.5, rng) for _ in range(1000)]
        assert all(s == 7.5 for s in samples)

    def test_samples_within_bounds(self, rng):
        samples = [sample_triangular(10.0, 12.0, 20.0, rng) for _ in range(10_000)]
        assert min(samples) >= 10.0
        assert max(samples) <= 20.0

    def test_mean_matches_analytic(self, rng):
        samples = [sample_triangular(10.0, 12.0, 20.0, rng) for _ in range(20_000)]
        assert statistics.fmean(samples) == pytest.approx(14.0, abs=0.1)

    def test_mode_at_lower_edge(self, rng):
        samples = [sample_triangular(0.0, 0.0, 1.0, rng) for _ in range(5000)]
        assert min(samples) >= 0.0
        assert max(samples) <= 1.0
        assert statistics.fmean(samples) == pytest.approx(1 / 3, abs=0.02)

    def test_mode_at_upper_edge(self, rng):
        samples = [sample_triangular(0.0, 1.0, 1.0, rng) for _ in range(5000)]
        assert statistics.fmean(samples) == pytest.approx(2 / 3, abs=0.02)


class TestNormal:
    def test_mean_and_std_dev(self, rng):
        samples = [sample_normal(5.0, 2.0, rng) for _ in range(20_000)]
        assert statistics.fmean(samples) == pytest.approx(5.0, abs=0.1)
        assert statistics.pstdev(samples) == pytest.approx(2.0, abs=0.1)

    def test_zero_std_dev_is_point_mass(self, rng):
        assert all(sample_normal(3.0, 0.0, rng) == 3.0 for _ in range(100))

    def test_zero_uniform_draw_does_not_hit_log_zero(self):
        # u1 is taken from (0, 1], so a 0.0 draw becomes log(1.0)
        assert sample_normal(3.0, 2.0, ZeroRandom()) == 3.0


class TestUniform:
    def test_ten_thousand_samples_within_bounds(self, rng):
        samples = [sample_uniform(-3.0, 8.0, rng) for _ in range(10_000)]
        assert all(-3.0 <= s <= 8.0 for s in samples)

    def test_equal_bounds(self, rng):
        assert sample_uniform(4.0, 4.0, rng) == 4.0


class TestBeta:
    def test_samples_in_unit_interval(self, rng):
        samples = [sample_beta(0.5, 0.5, rng) for _ in range(5000)]
        assert all(0.0 <= s <= 1.0 for s in samples)

    def test_mean_matches_parameters(self, rng):
        samples = [sample_beta(2.0, 5.0, rng) for _ in range(20_000)]
        assert statistics.fmean(samples) == pytest.approx(2 / 7, abs=0.01)

    def test_responds_to_parameters(self, rng):
        left = statistics.fmean(sample_beta(2.0, 8.0, rng) for _ in range(5000))
        right = statistics.fmean(sample_beta(8.0, 2.0, rng) for _ in range(5000))
        assert left < 0.3 < 0.7 < right


class TestSampleDriver:
    @pytest.mark.parametrize(
        "kind,params,low,high",
        [
            (DistributionKind.TRIANGULAR, TriangularParams(1.0, 2.0, 4.0), 1.0, 4.0),
            (DistributionKind.UNIFORM, UniformParams(10.0, 11.0), 10.0, 11.0),
            (DistributionKind.BETA, BetaParams(3.0, 3.0), 0.0, 1.0),
        ],
    )
    def test_dispatch_by_kind(self, rng, kind, params, low, high):
        driver = Driver("d", kind, params)
        samples = [sample_driver(driver, rng) for _ in range(1000)]
        assert all(low <= s <= high for s in samples)

    def test_normal_dispatch(self, rng):
        driver = Driver("d", DistributionKind.NORMAL, NormalParams(100.0, 0.0))
        assert sample_driver(driver, rng) == 100.0

    def test_unsupported_kind_raises(self, rng):
        driver = Driver("d", DistributionKind.UNIFORM, UniformParams(0.0, 1.0))
        # Bypass validation to mimic a corrupted driver
        object.__setattr__(driver, "distribution", "lognormal")
        with pytest.raises(ValueError, match="Unsupported distribution"):
            sample_driver(driver, rng)

    def test_seeded_draws_reproducible(self):
        driver = Driver("d", DistributionKind.NORMAL, NormalParams(0.0, 1.0))
        first = [sample_driver(driver, random.Random(7)) for _ in range(3)]
        second = [sample_driver(driver, random.Random(7)) for _ in range(3)]
        assert first == second


class TestDistributionSampler:
    def test_draw_uses_injected_rng(self):
        driver = Driver("d", DistributionKind.UNIFORM, UniformParams(0.0, 1.0))
        a = DistributionSampler(random.Random(1))
        b = DistributionSampler(random.Random(1))
        assert [a.draw(driver) for _ in range(5)] == [b.draw(driver) for _ in range(5)]

    def test_default_rng_created(self):
        driver = Driver("d", DistributionKind.UNIFORM, UniformParams(2.0, 3.0))
        assert 2.0 <= DistributionSampler().draw(driver) <= 3.0
