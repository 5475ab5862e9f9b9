"""
notebook_health/metrics/scale.py — Traffic-confidence scale.

The health score is multiplied by a scale in [0, 1] so that a notebook run
once by one person cannot look as healthy (or as broken) as one exercised by
dozens of users. Any callable honouring HealthScaleFn can be plugged into the
reporter: output in [0, 1], monotonic non-decreasing in both arguments.

Reference policy, a saturating exponential confidence per traffic dimension:

    scale = (1 - exp(-users / scale_user_constant))
          × (1 - exp(-executions_per_cell / scale_execution_constant))

    users=1, 1 exec/cell  → 0.39 × 0.63 ≈ 0.25
    users=5, 3 execs/cell → 0.92 × 0.95 ≈ 0.87
    users=20, 10/cell     → ≈ 1.00

Author: notebook-health maintainers
"""

import logging
from typing import Callable

import numpy as np

from notebook_health.config import DEFAULT_CONFIG, HealthConfig

logger = logging.getLogger(__name__)

HealthScaleFn = Callable[[int, float], float]


def _saturation(value: float, constant: float) -> float:
    if value <= 0 or constant <= 0:
        return 0.0
    return float(1.0 - np.exp(-value / constant))


def health_scale(
    distinct_user_count: int,
    executions_per_cell: float,
    config: HealthConfig = DEFAULT_CONFIG,
) -> float:
    """
    Confidence multiplier for a notebook's health score.

    Args:
        distinct_user_count: Distinct users with executions in the window.
        executions_per_cell: Executions in the window divided by cell count.
        config:              HealthConfig. Uses:
                                config.scale_user_constant
                                config.scale_execution_constant

    Returns:
        scale in [0.0, 1.0]. 0.0 for no users or no executions.
    """
    user_term = _saturation(distinct_user_count, config.scale_user_constant)
    exec_term = _saturation(executions_per_cell, config.scale_execution_constant)
    return float(np.clip(user_term * exec_term, 0.0, 1.0))


def make_health_scale(config: HealthConfig = DEFAULT_CONFIG) -> HealthScaleFn:
    """Bind config into a two-argument scale function."""

    def _scale(distinct_user_count: int, executions_per_cell: float) -> float:
        return health_scale(distinct_user_count, executions_per_cell, config)

    return _scale


def constant_scale(value: float = 1.0) -> HealthScaleFn:
    """A scale policy that ignores traffic (useful for calibration runs)."""
    value = float(np.clip(value, 0.0, 1.0))

    def _scale(distinct_user_count: int, executions_per_cell: float) -> float:
        return value

    return _scale
