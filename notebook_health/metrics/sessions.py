"""
notebook_health/metrics/sessions.py — Session reconstruction.

A session approximates one sitting of notebook use: every execution by one
user on one calendar day. Each session is reduced to two numbers:

    success_depth = (highest cell_number run successfully) + 1
                    0 if nothing in the session succeeded.
    failure_depth = lowest cell_number that failed
                    num_cells if nothing in the session failed. No failure
                    is modelled as "failed at the very end".

The reduction groups on (user_id, day, success) and takes MIN / MAX of the
cell number per group, then folds the success and failure halves of each
(user_id, day) back together.

Author: notebook-health maintainers
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, NamedTuple

import pandas as pd

logger = logging.getLogger(__name__)


class SessionKey(NamedTuple):
    """(user, calendar day) composite key of a session."""

    user_id: Any
    day: date


@dataclass(frozen=True)
class SessionDepth:
    """
    Depth values for a single session (un-normalized cell numbers).

    Fields:
        success_depth: 1 + highest successfully executed cell_number (0 if none).
        failure_depth: Lowest failed cell_number (num_cells if none).
    """

    success_depth: int
    failure_depth: int


def reconstruct_sessions(
    df_exec: pd.DataFrame,
    num_cells: int,
) -> dict[SessionKey, SessionDepth]:
    """
    Group executions into per-(user, day) sessions and compute their depths.

    Args:
        df_exec:   Executions for one notebook inside the scoring window
                   (user_id, code_cell_number, success, timestamp columns).
        num_cells: Total code cells in the notebook. Used as the failure depth
                   of sessions with no failed execution.

    Returns:
        sessions: Dict mapping SessionKey → SessionDepth. Key order carries no
                  meaning; only the value set feeds the depth aggregator.

    Raises:
        ValueError: if num_cells <= 0. Notebooks without cells are filtered
                    out before any session is built.
    """
    if num_cells <= 0:
        raise ValueError(f"reconstruct_sessions requires num_cells > 0, got {num_cells}")

    if len(df_exec) == 0:
        return {}

    df = df_exec[["user_id", "code_cell_number", "success"]].copy()
    df["day"] = pd.to_datetime(df_exec["timestamp"]).dt.date

    grouped = (
        df.groupby(["user_id", "day", "success"], dropna=False)["code_cell_number"]
        .agg(["min", "max"])
        .reset_index()
    )

    # {(user, day): {True: max success + 1, False: min failure}}
    halves: dict[SessionKey, dict[bool, int]] = {}
    for row in grouped.itertuples(index=False):
        # Anonymous executions form their own session per day.
        user_id = None if pd.isna(row.user_id) else row.user_id
        key = SessionKey(user_id, row.day)
        success = bool(row.success)
        halves.setdefault(key, {})[success] = (
            int(row.max) + 1 if success else int(row.min)
        )

    sessions: dict[SessionKey, SessionDepth] = {
        key: SessionDepth(
            success_depth=values.get(True, 0),
            failure_depth=values.get(False, num_cells),
        )
        for key, values in halves.items()
    }

    logger.debug(
        "Reconstructed %d sessions from %d executions (%d cells).",
        len(sessions),
        len(df_exec),
        num_cells,
    )
    return sessions
