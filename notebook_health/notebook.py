"""
notebook_health/notebook.py — Per-notebook health operations.

NotebookHealth binds a Notebook to its collaborators (execution log, cell
status provider, scale policy) and exposes each health metric as a method
taking window_days:

    nb = NotebookHealth(notebook, execution_log, cell_status_provider)
    nb.pass_rate(30)          # float | None
    nb.execution_depth(30)    # float | None
    nb.compute_health(30)     # float | None
    nb.health_status(30)      # HealthReport

Every method fetches its window once and derives everything from that single
frame. The object itself holds no mutable state between calls.

Author: notebook-health maintainers
"""

import logging
from typing import Optional

import pandas as pd

from notebook_health.config import DEFAULT_CONFIG, HealthConfig
from notebook_health.log.accessor import CellStatusProvider, ExecutionLogAccessor
from notebook_health.metrics.cells import (
    CellMetrics,
    compute_cell_metrics,
    count_unhealthy_cells,
)
from notebook_health.metrics.depth import DepthMetrics, compute_execution_depths
from notebook_health.metrics.pass_rate import compute_pass_rate
from notebook_health.metrics.scale import HealthScaleFn, make_health_scale
from notebook_health.metrics.score import compose_score
from notebook_health.models import Notebook
from notebook_health.reports.health_report import HealthReport, build_health_report

logger = logging.getLogger(__name__)


class NotebookHealth:
    """
    Health metrics for one notebook.

    Args:
        notebook:             Notebook (identity + code cells).
        execution_log:        ExecutionLogAccessor for the notebook's executions.
        cell_status_provider: CellStatusProvider giving each cell's status.
        scale_fn:             Traffic-confidence policy (defaults to
                              make_health_scale(config)).
        config:               HealthConfig.
    """

    def __init__(
        self,
        notebook: Notebook,
        execution_log: ExecutionLogAccessor,
        cell_status_provider: CellStatusProvider,
        scale_fn: Optional[HealthScaleFn] = None,
        config: HealthConfig = DEFAULT_CONFIG,
    ):
        self.notebook = notebook
        self.execution_log = execution_log
        self.cell_status_provider = cell_status_provider
        self.scale_fn = scale_fn or make_health_scale(config)
        self.config = config

    def _days(self, window_days: Optional[int]) -> int:
        return self.config.window_days if window_days is None else window_days

    # ── Window access ─────────────────────────────────────────────────────────

    def latest_executions(self, window_days: Optional[int] = None) -> pd.DataFrame:
        """Executions from the last window_days days."""
        return self.execution_log.fetch_executions(
            self.notebook.notebook_id, self._days(window_days)
        )

    def all_executions(self) -> pd.DataFrame:
        """Every execution of the notebook, regardless of age."""
        return self.execution_log.fetch_executions(self.notebook.notebook_id, None)

    def unique_users(self, window_days: Optional[int] = None) -> int:
        """Number of distinct users over the window."""
        return int(self.latest_executions(window_days)["user_id"].nunique())

    def runtime_by_cell(self, window_days: Optional[int] = None) -> dict[int, float]:
        """Mean runtime per cell_number over the window (cells with no runtime omitted)."""
        df = self.latest_executions(window_days)
        runtimes = df.dropna(subset=["runtime"]).groupby("code_cell_number")["runtime"].mean()
        return {int(cell): float(runtime) for cell, runtime in runtimes.items()}

    # ── Execution metrics ─────────────────────────────────────────────────────

    def pass_rate(self, window_days: Optional[int] = None) -> Optional[float]:
        """Overall execution pass rate."""
        return compute_pass_rate(self.latest_executions(window_days))

    def execution_depths(self, window_days: Optional[int] = None) -> Optional[DepthMetrics]:
        """Execution depth and first failure depth, averaged over sessions."""
        return compute_execution_depths(
            self.latest_executions(window_days), self.notebook.num_cells
        )

    def first_failure_depth(self, window_days: Optional[int] = None) -> Optional[float]:
        """On average, where do users encounter their first failure?"""
        depths = self.execution_depths(window_days)
        return depths.first_failure_depth if depths else None

    def execution_depth(self, window_days: Optional[int] = None) -> Optional[float]:
        """On average, how far into the notebook do users get?"""
        depths = self.execution_depths(window_days)
        return depths.execution_depth if depths else None

    def compute_health(self, window_days: Optional[int] = None) -> Optional[float]:
        """Health score in [-1, 1], or None without cells or executions."""
        num_cells = self.notebook.num_cells
        df = self.latest_executions(window_days)
        if num_cells == 0 or len(df) == 0:
            return None

        scale = self.scale_fn(int(df["user_id"].nunique()), len(df) / num_cells)
        depths = compute_execution_depths(df, num_cells)
        return compose_score(
            compute_pass_rate(df),
            depths.execution_depth if depths else None,
            scale,
        )

    # ── Cell metrics ──────────────────────────────────────────────────────────

    def cell_statuses(self, window_days: Optional[int] = None) -> list[tuple[int, str]]:
        """(cell_number, status) for every code cell, in cell_number order."""
        days = self._days(window_days)
        return [
            (
                cell.cell_number,
                self.cell_status_provider.cell_status(self.notebook.notebook_id, cell, days),
            )
            for cell in self.notebook.cells
        ]

    def cell_metrics(self, window_days: Optional[int] = None) -> CellMetrics:
        """Cell counts plus first bad / last good cell fractions."""
        return compute_cell_metrics(self.cell_statuses(window_days))

    def unhealthy_cells(self, window_days: Optional[int] = None) -> int:
        """Number of unhealthy cells."""
        return count_unhealthy_cells(self.cell_statuses(window_days))

    # ── Report ────────────────────────────────────────────────────────────────

    def health_status(self, window_days: Optional[int] = None) -> HealthReport:
        """Full health report for the window."""
        days = self._days(window_days)
        if self.notebook.num_cells == 0:
            return build_health_report(self.notebook, pd.DataFrame(), [], days, self.scale_fn, self.config)

        df = self.latest_executions(days)
        statuses = self.cell_statuses(days) if len(df) > 0 else []
        return build_health_report(
            self.notebook, df, statuses, days, self.scale_fn, self.config
        )
