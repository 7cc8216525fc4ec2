"""
Constants and defaults for forecast simulation and scoring.

Simulation sizes can be overridden from the environment so that callers
(notebooks, scripts, services) can tune run time without code changes:

    FERMI_ITERATIONS  - default Monte Carlo iteration count (10,000)
    FERMI_BIN_COUNT   - default number of histogram bins (50)
    FERMI_N_WORKERS   - default worker processes for parallel runs (4)

Brier tier thresholds and calibration bins are fixed and not configurable.
"""

import os


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


# ============================================================================
# Simulation Defaults
# ============================================================================

DEFAULT_ITERATIONS = _env_int("FERMI_ITERATIONS", 10_000)
DEFAULT_BIN_COUNT = _env_int("FERMI_BIN_COUNT", 50)
DEFAULT_N_WORKERS = _env_int("FERMI_N_WORKERS", 4)

# Order-statistic percentiles reported on every simulation (P10, P50, P90)
PERCENTILES = (0.10, 0.50, 0.90)


# ============================================================================
# Scoring Constants
# ============================================================================

# Brier score tiers (lower is better)
SUPERFORECASTER_THRESHOLD = 0.10
GOOD_THRESHOLD = 0.20
FAIR_THRESHOLD = 0.25  # Always predicting 0.5 scores exactly 0.25

# Five fixed calibration bins; the last bin is closed at 1.0
CALIBRATION_BIN_EDGES = (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)
