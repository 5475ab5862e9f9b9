"""
notebook_health/pipeline.py — Batch health scoring across notebooks.

Provides run_health_pipeline(), which scores every notebook in an inventory
against one execution log and returns the reports plus a summary frame.

Usage:
    from notebook_health.log.accessor import DataFrameExecutionLog, load_notebooks_csv
    from notebook_health.pipeline import run_health_pipeline

    result = run_health_pipeline(
        load_notebooks_csv("notebooks.csv"),
        DataFrameExecutionLog.from_csv("executions.csv"),
    )
    print(result.summary_frame)

Author: notebook-health maintainers
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

import pandas as pd

from notebook_health.config import DEFAULT_CONFIG, HealthConfig
from notebook_health.log.accessor import (
    CellStatusProvider,
    ExecutionLogAccessor,
    StaticCellStatusProvider,
)
from notebook_health.metrics.scale import HealthScaleFn
from notebook_health.metrics.score import HEALTHY, STATUSES, UNHEALTHY, UNKNOWN
from notebook_health.models import Notebook
from notebook_health.notebook import NotebookHealth
from notebook_health.reports.health_report import HealthReport

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Output of one batch scoring run.

    Fields:
        window_days:   Window every notebook was scored over.
        reports:       notebook_id → HealthReport.
        summary_frame: One row per notebook, every HealthReport field as a column.
        summary:       health_summary() of the reports.
    """

    window_days: int
    reports: dict[str, HealthReport] = field(default_factory=dict)
    summary_frame: pd.DataFrame = field(default_factory=pd.DataFrame)
    summary: dict = field(default_factory=dict)


def health_summary(reports: list[HealthReport]) -> dict:
    """
    Distribution summary across health reports.

    Returns:
        {
          'total_notebooks': int,
          'healthy': int,
          'unhealthy': int,
          'unknown': int,
          'scored': int,          # notebooks with a defined score
          'mean_score': float | None,
          'mean_pass_rate': float | None,
        }
    """
    counts = {status: 0 for status in STATUSES}
    for report in reports:
        counts[report.status if report.status in counts else UNKNOWN] += 1

    scores = [r.score for r in reports if r.score is not None]
    pass_rates = [r.pass_rate for r in reports if r.pass_rate is not None]

    return {
        "total_notebooks": len(reports),
        "healthy": counts[HEALTHY],
        "unhealthy": counts[UNHEALTHY],
        "unknown": counts[UNKNOWN],
        "scored": len(scores),
        "mean_score": sum(scores) / len(scores) if scores else None,
        "mean_pass_rate": sum(pass_rates) / len(pass_rates) if pass_rates else None,
    }


def run_health_pipeline(
    notebooks: Mapping[str, Notebook],
    execution_log: ExecutionLogAccessor,
    cell_status_provider: Optional[CellStatusProvider] = None,
    window_days: Optional[int] = None,
    config: HealthConfig = DEFAULT_CONFIG,
    scale_fn: Optional[HealthScaleFn] = None,
) -> PipelineResult:
    """
    Score every notebook over the same trailing window.

    Args:
        notebooks:            notebook_id → Notebook.
        execution_log:        Shared ExecutionLogAccessor.
        cell_status_provider: Per-cell statuses. Defaults to an empty
                              StaticCellStatusProvider (every cell unknown).
        window_days:          Window length (defaults to config.window_days).
        config:               HealthConfig.
        scale_fn:             Scale policy override.

    Returns:
        PipelineResult. Rows of summary_frame are ordered by score ascending
        (worst first), unscored notebooks last.
    """
    days = config.window_days if window_days is None else window_days
    provider = cell_status_provider or StaticCellStatusProvider()

    logger.info("Health pipeline starting: %d notebooks, window=%d days.", len(notebooks), days)

    reports: dict[str, HealthReport] = {}
    for notebook_id, notebook in notebooks.items():
        nb = NotebookHealth(notebook, execution_log, provider, scale_fn, config)
        reports[notebook_id] = nb.health_status(days)

    rows = [
        {**report.to_dict(include_none=True), "notebook_id": notebook_id}
        for notebook_id, report in reports.items()
    ]
    summary_frame = pd.DataFrame(rows, columns=HealthReport.field_names())
    if len(summary_frame) > 0:
        summary_frame = summary_frame.sort_values(
            "score", ascending=True, na_position="last", kind="mergesort"
        ).reset_index(drop=True)

    summary = health_summary(list(reports.values()))
    logger.info(
        "Health pipeline complete: %d healthy, %d unhealthy, %d unknown (%d scored).",
        summary["healthy"],
        summary["unhealthy"],
        summary["unknown"],
        summary["scored"],
    )

    return PipelineResult(
        window_days=days,
        reports=reports,
        summary_frame=summary_frame,
        summary=summary,
    )
