"""
notebook_health/reports/health_report.py — Notebook health report.

Orchestrates every metric for one notebook and one trailing window, and
assembles the result once, at the end, into a HealthReport:

    1. No code cells          → unknown, "No code cells"
    2. No executions in window → unknown, "No executions in last N days"
    3. Otherwise: executions, users, pass rate, depths, scale, score,
       cell metrics, status, and a one-line description such as
       "75% pass rate (2 users) in last 30 days".

build_health_report() is a pure function of (notebook, executions, cell
statuses, window): nothing survives between calls.

Author: notebook-health maintainers
"""

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Iterable, Optional

import pandas as pd

from notebook_health.config import DEFAULT_CONFIG, HealthConfig
from notebook_health.metrics.cells import compute_cell_metrics
from notebook_health.metrics.depth import compute_execution_depths
from notebook_health.metrics.pass_rate import compute_pass_rate
from notebook_health.metrics.scale import HealthScaleFn, make_health_scale
from notebook_health.metrics.score import UNKNOWN, score_notebook
from notebook_health.models import Notebook

logger = logging.getLogger(__name__)


@dataclass
class HealthReport:
    """
    Health of one notebook over one window.

    Only status and description are always set. Every other field is None
    when it was not computed (no cells, no executions, undefined metric).
    """

    status: str
    description: str
    executions: Optional[int] = None
    users: Optional[int] = None
    pass_rate: Optional[float] = None
    first_failure_depth: Optional[float] = None
    execution_depth: Optional[float] = None
    score: Optional[float] = None
    scale: Optional[float] = None
    window_days: Optional[int] = None
    total_cells: Optional[int] = None
    healthy_cells: Optional[int] = None
    unhealthy_cells: Optional[int] = None
    unknown_cells: Optional[int] = None
    first_bad_cell_fraction: Optional[float] = None
    last_good_cell_fraction: Optional[float] = None
    notebook_id: Optional[str] = None

    def to_dict(self, include_none: bool = False) -> dict:
        """Report as a dict. Unpopulated fields are dropped unless include_none."""
        data = asdict(self)
        if include_none:
            return data
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


def pluralize(count: int, word: str) -> str:
    """'1 user', '2 users'."""
    return f"{count} {word if count == 1 else word + 's'}"


def describe_pass_rate(pass_rate: float, users: int, window_days: int) -> str:
    """Summary line: truncated percentage, user count, window."""
    percent = math.trunc(pass_rate * 100)
    return f"{percent}% pass rate ({pluralize(users, 'user')}) in last {window_days} days"


def build_health_report(
    notebook: Notebook,
    df_exec: pd.DataFrame,
    cell_statuses: Iterable[tuple[int, str]],
    window_days: int,
    scale_fn: Optional[HealthScaleFn] = None,
    config: HealthConfig = DEFAULT_CONFIG,
) -> HealthReport:
    """
    Compute the full health report for one notebook window.

    Args:
        notebook:      Notebook being scored.
        df_exec:       Executions for the notebook inside the window, already
                       materialized. Every metric reads this same frame.
        cell_statuses: (cell_number, status) for each code cell, for the same
                       window. Only consumed when the notebook has executions.
        window_days:   Window length, used in the description.
        scale_fn:      Traffic-confidence policy. Defaults to
                       make_health_scale(config).
        config:        HealthConfig with classification thresholds.

    Returns:
        HealthReport.
    """
    num_cells = notebook.num_cells
    if num_cells == 0:
        return HealthReport(
            status=UNKNOWN,
            description="No code cells",
        )

    num_executions = len(df_exec)
    if num_executions == 0:
        return HealthReport(
            status=UNKNOWN,
            description=f"No executions in last {window_days} days",
            notebook_id=notebook.notebook_id,
        )

    scale_fn = scale_fn or make_health_scale(config)

    num_users = int(df_exec["user_id"].nunique())
    pass_rate = compute_pass_rate(df_exec)
    depths = compute_execution_depths(df_exec, num_cells)
    execution_depth = depths.execution_depth if depths else None
    first_failure_depth = depths.first_failure_depth if depths else None

    scale = scale_fn(num_users, num_executions / num_cells)
    scored = score_notebook(pass_rate, execution_depth, scale, config)
    cells = compute_cell_metrics(cell_statuses)

    description = (
        describe_pass_rate(pass_rate, num_users, window_days)
        if pass_rate is not None
        else scored.reason
    )

    report = HealthReport(
        status=scored.status,
        description=description,
        executions=num_executions,
        users=num_users,
        pass_rate=pass_rate,
        first_failure_depth=first_failure_depth,
        execution_depth=execution_depth,
        score=scored.score,
        scale=scale,
        window_days=window_days,
        notebook_id=notebook.notebook_id,
        **cells.to_dict(),
    )

    logger.debug(
        "Health report for '%s': %s (%s).",
        notebook.notebook_id,
        report.status,
        report.description,
    )
    return report
