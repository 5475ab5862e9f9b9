"""
notebook_health/metrics/depth.py — Execution depth and first failure depth.

    execution_depth     = mean over sessions of success_depth / num_cells
                          "On average, how far into the notebook do users get?"
    first_failure_depth = mean over sessions of failure_depth / num_cells
                          "On average, where do users hit their first failure?"

Both are plain arithmetic means across sessions; a session with fifty
executions weighs the same as a session with one.

Author: notebook-health maintainers
"""

import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from notebook_health.metrics.sessions import (
    SessionDepth,
    SessionKey,
    reconstruct_sessions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepthMetrics:
    """
    Window-level depth metrics.

    Fields:
        execution_depth:     Mean normalized success depth, in [0, 1].
        first_failure_depth: Mean normalized failure depth, in [0, 1].
        sessions:            Number of sessions averaged over.
    """

    execution_depth: float
    first_failure_depth: float
    sessions: int


def aggregate_depths(
    sessions: dict[SessionKey, SessionDepth],
    num_cells: int,
) -> Optional[DepthMetrics]:
    """
    Average normalized session depths.

    Args:
        sessions:  Output of reconstruct_sessions().
        num_cells: Total code cells in the notebook.

    Returns:
        DepthMetrics, or None when there are no sessions or no cells.
    """
    num_sessions = len(sessions)
    if num_sessions == 0 or num_cells <= 0:
        return None

    depths = 0.0
    failures = 0.0
    for depth in sessions.values():
        depths += depth.success_depth / num_cells
        failures += depth.failure_depth / num_cells

    return DepthMetrics(
        execution_depth=depths / num_sessions,
        first_failure_depth=failures / num_sessions,
        sessions=num_sessions,
    )


def compute_execution_depths(
    df_exec: pd.DataFrame,
    num_cells: int,
) -> Optional[DepthMetrics]:
    """Reconstruct sessions from df_exec and aggregate their depths."""
    if num_cells <= 0 or len(df_exec) == 0:
        return None
    return aggregate_depths(reconstruct_sessions(df_exec, num_cells), num_cells)
