"""
notebook_health/metrics/score.py — Health score composition and status.

    score = scale × pass_rate + scale × execution_depth − 1.0

With pass_rate, execution_depth and scale all in [0, 1] the score lies in
[−1, 2·scale − 1] ⊆ [−1, 1]. A low-traffic notebook (small scale) therefore
cannot reach 'healthy' no matter how clean its runs are.

Status (inclusive boundaries, thresholds from HealthConfig):
    score >= healthy_threshold    (0.25)  → 'healthy'
    score <= unhealthy_threshold (−0.25)  → 'unhealthy'
    otherwise, or no score                → 'unknown'

Author: notebook-health maintainers
"""

import logging
from dataclasses import dataclass
from typing import Optional

from notebook_health.config import DEFAULT_CONFIG, HealthConfig

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
UNKNOWN = "unknown"
STATUSES = (HEALTHY, UNHEALTHY, UNKNOWN)


@dataclass
class HealthScoreResult:
    """
    Score + status for one notebook window.

    Fields:
        score:  Health score in [−1, 1], or None when undefined.
        status: 'healthy' | 'unhealthy' | 'unknown'.
        scale:  Scale multiplier applied (None if not computed).
        reason: Why the score is undefined (None when a score exists).
    """

    score: Optional[float]
    status: str
    scale: Optional[float] = None
    reason: Optional[str] = None


def compose_score(
    pass_rate: Optional[float],
    execution_depth: Optional[float],
    scale: float,
) -> Optional[float]:
    """Combine scaled pass rate and scaled depth; None propagates."""
    if pass_rate is None or execution_depth is None:
        return None
    return scale * pass_rate + scale * execution_depth - 1.0


def classify_score(
    score: Optional[float],
    config: HealthConfig = DEFAULT_CONFIG,
) -> str:
    """Map a score to 'healthy' | 'unhealthy' | 'unknown'."""
    if score is None:
        return UNKNOWN
    if score >= config.healthy_threshold:
        return HEALTHY
    if score <= config.unhealthy_threshold:
        return UNHEALTHY
    return UNKNOWN


def score_notebook(
    pass_rate: Optional[float],
    execution_depth: Optional[float],
    scale: float,
    config: HealthConfig = DEFAULT_CONFIG,
) -> HealthScoreResult:
    """
    Compose and classify a health score.

    Undefined inputs short-circuit to an 'unknown' result with a reason
    instead of attempting arithmetic on missing values.
    """
    if pass_rate is None:
        return HealthScoreResult(None, UNKNOWN, scale, "Pass rate undefined (no executions)")
    if execution_depth is None:
        return HealthScoreResult(None, UNKNOWN, scale, "Execution depth undefined (no sessions)")

    score = compose_score(pass_rate, execution_depth, scale)
    status = classify_score(score, config)
    logger.debug(
        "Score %.3f (scale=%.3f, pass_rate=%.3f, depth=%.3f) → %s.",
        score,
        scale,
        pass_rate,
        execution_depth,
        status,
    )
    return HealthScoreResult(score=score, status=status, scale=scale)
