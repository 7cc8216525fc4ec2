"""
Unit tests for package defaults and environment overrides.
"""

import pytest

from fermi_forecast import config


class TestEnvironmentConfig:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("FERMI_TEST_VALUE", raising=False)
        assert config._env_int("FERMI_TEST_VALUE", 7) == 7

    def test_override(self, monkeypatch):
        monkeypatch.setenv("FERMI_TEST_VALUE", "250")
        assert config._env_int("FERMI_TEST_VALUE", 7) == 250

    def test_non_integer_raises(self, monkeypatch):
        monkeypatch.setenv("FERMI_TEST_VALUE", "many")
        with pytest.raises(ValueError, match="must be an integer"):
            config._env_int("FERMI_TEST_VALUE", 7)

    def test_non_positive_raises(self, monkeypatch):
        monkeypatch.setenv("FERMI_TEST_VALUE", "0")
        with pytest.raises(ValueError, match="must be > 0"):
            config._env_int("FERMI_TEST_VALUE", 7)

    def test_fixed_thresholds(self):
        assert config.SUPERFORECASTER_THRESHOLD == 0.10
        assert config.GOOD_THRESHOLD == 0.20
        assert config.FAIR_THRESHOLD == 0.25
        assert config.CALIBRATION_BIN_EDGES == (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)

    def test_defaults_are_positive(self):
        assert config.DEFAULT_ITERATIONS > 0
        assert config.DEFAULT_BIN_COUNT > 0
        assert config.DEFAULT_N_WORKERS > 0
        assert config.PERCENTILES == (0.10, 0.50, 0.90)
