"""
notebook_health/config.py — All tunable parameters for notebook health scoring.

No threshold should ever be hardcoded in a metric module. The scoring window,
classification boundaries and traffic-scale constants live here so that
calibration changes are a single-file diff.

Author: notebook-health maintainers
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthConfig:
    """
    Immutable configuration for the notebook health scorer.

    Override by constructing a new HealthConfig with the desired values.
    """

    # ── Scoring Window ────────────────────────────────────────────────────────
    window_days: int = 30
    # Trailing window (days) of executions considered when no explicit
    # window is passed to a scoring call.

    # ── Classification Thresholds ─────────────────────────────────────────────
    healthy_threshold: float = 0.25
    # score >= this value → 'healthy' (inclusive).

    unhealthy_threshold: float = -0.25
    # score <= this value → 'unhealthy' (inclusive).
    # Scores strictly between the two thresholds → 'unknown'.

    # ── Health Scale (traffic confidence) ─────────────────────────────────────
    scale_user_constant: float = 2.0
    # User term of the scale: 1 - exp(-users / constant).
    # 2 users → 0.63, 5 users → 0.92, 10 users → 0.99.

    scale_execution_constant: float = 1.0
    # Execution term of the scale: 1 - exp(-executions_per_cell / constant).
    # One run per cell on average → 0.63, three runs per cell → 0.95.

    # ── Listings ──────────────────────────────────────────────────────────────
    recent_limit: int = 20
    # Default row count for the recently-executed / recently-failed listings.


# Singleton default: import this everywhere instead of constructing anew.
DEFAULT_CONFIG = HealthConfig()
