"""
notebook_health/log/accessor.py — Execution log and cell status providers.

The scoring core depends on two data-access contracts:

    ExecutionLogAccessor.fetch_executions(notebook_id, window_days)
        → materialized DataFrame of executions inside the trailing window.

    CellStatusProvider.cell_status(notebook_id, cell, window_days)
        → 'healthy' | 'unhealthy' | 'unknown' for one cell.

This module defines both contracts and an in-memory reference implementation
of each, loadable from CSV. A database-backed accessor only needs to honour
the same signatures: fetch once, return a consistent snapshot, never a lazy
query object.

Author: notebook-health maintainers
"""

import logging
import os
from typing import Any, Iterable, Mapping, Optional, Protocol

import pandas as pd

from notebook_health.log.executions import (
    EXECUTION_COLUMNS,
    executions_frame,
    normalize_executions,
)
from notebook_health.metrics.score import STATUSES, UNKNOWN
from notebook_health.models import CodeCell, Notebook

logger = logging.getLogger(__name__)


class ExecutionLogAccessor(Protocol):
    """Supplies raw execution events for a notebook within a time window."""

    def fetch_executions(
        self, notebook_id: str, window_days: Optional[int]
    ) -> pd.DataFrame:
        ...


class CellStatusProvider(Protocol):
    """Supplies the externally computed health status of one code cell."""

    def cell_status(
        self, notebook_id: str, cell: CodeCell, window_days: int
    ) -> str:
        ...


def _window_bounds(
    timestamps: pd.Series, as_of: Any, window_days: Optional[int]
) -> tuple[Optional[pd.Timestamp], pd.Timestamp]:
    """(exclusive start, inclusive end) of the window, in the log's timezone."""
    tz = getattr(timestamps.dt, "tz", None)
    if as_of is None:
        end = pd.Timestamp.now(tz=tz)
    else:
        end = pd.Timestamp(as_of)
        if tz is not None and end.tzinfo is None:
            end = end.tz_localize(tz)
        elif tz is None and end.tzinfo is not None:
            end = end.tz_convert(None)
    if window_days is None:
        return None, end
    return end - pd.Timedelta(days=window_days), end


class DataFrameExecutionLog:
    """
    In-memory execution log backed by a pandas DataFrame.

    The window for a fetch is as_of - window_days < timestamp <= as_of. When
    as_of is None the current time is read at fetch time, so repeated calls over an
    unchanged log return identical frames as long as no execution sits on the
    moving window edge.

    Args:
        df:    Executions with at least user_id, code_cell_number, success,
               timestamp (see notebook_health.log.executions).
        as_of: Reference "now" for window computation (optional).
    """

    def __init__(self, df: pd.DataFrame, as_of: Any = None):
        self._df = normalize_executions(df)
        self.as_of = as_of
        logger.debug(
            "Execution log loaded: %d executions across %d notebooks.",
            len(self._df),
            self._df["notebook_id"].nunique(),
        )

    @classmethod
    def from_records(cls, records: Iterable[Any], as_of: Any = None) -> "DataFrameExecutionLog":
        return cls(executions_frame(records), as_of=as_of)

    @classmethod
    def from_csv(cls, path: str, as_of: Any = None) -> "DataFrameExecutionLog":
        """Load an execution log CSV with EXECUTION_COLUMNS headers."""
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Execution log not found: {path}")
        logger.info("Loading execution log from: %s", path)
        df = pd.read_csv(path, dtype={"notebook_id": str, "user_id": str})
        return cls(df, as_of=as_of)

    def __len__(self) -> int:
        return len(self._df)

    def fetch_executions(
        self, notebook_id: Optional[str], window_days: Optional[int]
    ) -> pd.DataFrame:
        """
        Return a copy of the executions for notebook_id inside the window.

        Args:
            notebook_id: Notebook to filter on. None returns every notebook.
                         A log whose notebook_id column is entirely empty is
                         a single-notebook log and is returned unfiltered.
            window_days: Trailing window length. None means all history up
                         to as_of (no upper bound when as_of is unset).

        Raises:
            ValueError: if window_days is negative.
        """
        if window_days is not None and window_days < 0:
            raise ValueError(f"window_days must be non-negative, got {window_days}")

        df = self._df
        if notebook_id is not None:
            if df["notebook_id"].isna().all():
                # Unlabelled log: every row belongs to the notebook being scored.
                logger.debug(
                    "Execution log has no notebook_id values, serving it for '%s'.",
                    notebook_id,
                )
            else:
                df = df[df["notebook_id"] == notebook_id]
        if len(df) > 0 and (window_days is not None or self.as_of is not None):
            start, end = _window_bounds(df["timestamp"], self.as_of, window_days)
            df = df[df["timestamp"] <= end]
            if start is not None:
                df = df[df["timestamp"] > start]
        return df[EXECUTION_COLUMNS].reset_index(drop=True).copy()

    def _latest_by_notebook(self, df: pd.DataFrame, column: str, limit: Optional[int]) -> pd.DataFrame:
        df = df[df["notebook_id"].notna()]
        if len(df) == 0:
            return pd.DataFrame(columns=["notebook_id", column])
        latest = (
            df.groupby("notebook_id")["timestamp"]
            .max()
            .rename(column)
            .reset_index()
            .sort_values(column, ascending=False, kind="mergesort")
            .reset_index(drop=True)
        )
        return latest.head(limit) if limit is not None else latest

    def recently_executed(self, limit: Optional[int] = None) -> pd.DataFrame:
        """Notebooks ordered by their most recent execution (newest first)."""
        return self._latest_by_notebook(self._df, "last_exec", limit)

    def recently_failed(self, limit: Optional[int] = None) -> pd.DataFrame:
        """Notebooks ordered by their most recent failed execution (newest first)."""
        return self._latest_by_notebook(
            self._df[~self._df["success"]], "last_failure", limit
        )


class StaticCellStatusProvider:
    """
    Cell statuses looked up from a precomputed mapping.

    Keys are (notebook_id, cell_number); cells without an entry are 'unknown'.
    The window argument is accepted for contract compatibility: the mapping
    is assumed to have been computed for the window being scored.
    """

    def __init__(self, statuses: Optional[Mapping[tuple[str, int], str]] = None):
        self._statuses: dict[tuple[str, int], str] = {}
        for (notebook_id, cell_number), status in (statuses or {}).items():
            status = str(status).strip().lower()
            if status not in STATUSES:
                logger.warning(
                    "Unrecognised cell status '%s' for %s cell %s, treating as unknown.",
                    status,
                    notebook_id,
                    cell_number,
                )
                status = UNKNOWN
            self._statuses[(str(notebook_id), int(cell_number))] = status

    @classmethod
    def from_csv(cls, path: str) -> "StaticCellStatusProvider":
        """Load notebook_id, cell_number, status rows."""
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Cell status file not found: {path}")
        df = pd.read_csv(path, dtype={"notebook_id": str})
        missing = [c for c in ("notebook_id", "cell_number", "status") if c not in df.columns]
        if missing:
            raise ValueError(f"Cell status file {path} is missing columns: {missing}")
        statuses = {
            (row["notebook_id"], int(row["cell_number"])): row["status"]
            for _, row in df.iterrows()
        }
        logger.info("Loaded %d cell statuses from: %s", len(statuses), path)
        return cls(statuses)

    def cell_status(self, notebook_id: str, cell: CodeCell, window_days: int) -> str:
        return self._statuses.get((str(notebook_id), cell.cell_number), UNKNOWN)


def load_notebooks_csv(path: str) -> dict[str, Notebook]:
    """
    Build Notebook objects from a notebook_id, cell_number[, title] CSV.

    A notebook listed with an empty cell_number is kept with zero cells so it
    still receives a "No code cells" report.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Notebook inventory not found: {path}")
    logger.info("Loading notebook inventory from: %s", path)
    df = pd.read_csv(path, dtype={"notebook_id": str})
    missing = [c for c in ("notebook_id", "cell_number") if c not in df.columns]
    if missing:
        raise ValueError(f"Notebook inventory {path} is missing columns: {missing}")

    notebooks: dict[str, Notebook] = {}
    for notebook_id, group in df.groupby("notebook_id", sort=True):
        numbers = group["cell_number"].dropna().astype(int).tolist()
        title = ""
        if "title" in group.columns:
            titles = group["title"].dropna()
            title = str(titles.iloc[0]) if len(titles) else ""
        notebooks[notebook_id] = Notebook.from_cell_numbers(notebook_id, numbers, title)

    logger.info("Loaded %d notebooks.", len(notebooks))
    return notebooks
