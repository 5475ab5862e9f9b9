"""
notebook_health/log/executions.py — Execution records and the canonical frame.

An Execution is one recorded run of one code cell by one user. Records are
immutable once written and are owned by the log store; the scoring core only
ever reads them as a pandas DataFrame with EXECUTION_COLUMNS.

Author: notebook-health maintainers
"""

import logging
from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

import pandas as pd

logger = logging.getLogger(__name__)


EXECUTION_COLUMNS = [
    "notebook_id",
    "user_id",
    "code_cell_number",
    "success",
    "timestamp",
    "runtime",
]

REQUIRED_COLUMNS = ["user_id", "code_cell_number", "success", "timestamp"]


@dataclass(frozen=True)
class Execution:
    """
    A single recorded run of one code cell.

    Fields:
        user_id:          Identifier of the user who ran the cell.
        code_cell_number: cell_number of the executed cell within its notebook.
        success:          True if the cell ran without error.
        timestamp:        When the execution was recorded.
        runtime:          Cell runtime in seconds (optional).
        notebook_id:      Owning notebook (optional for single-notebook logs).
    """

    user_id: str
    code_cell_number: int
    success: bool
    timestamp: datetime
    runtime: Optional[float] = None
    notebook_id: Optional[str] = None


def _coerce_success(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes", "y")
    return bool(value)


def normalize_executions(df: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of df with canonical columns and dtypes.

    Missing optional columns (notebook_id, runtime) are added as empty.
    Raises ValueError if any of REQUIRED_COLUMNS is absent.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Execution log is missing required columns: {missing}")

    df = df.copy()
    if "notebook_id" not in df.columns:
        df["notebook_id"] = None
    if "runtime" not in df.columns:
        df["runtime"] = float("nan")

    df["timestamp"] = pd.to_datetime(df["timestamp"])
    df["code_cell_number"] = df["code_cell_number"].astype(int)
    df["success"] = df["success"].map(_coerce_success).astype(bool)
    df["runtime"] = pd.to_numeric(df["runtime"], errors="coerce")

    return df[EXECUTION_COLUMNS].reset_index(drop=True)


def executions_frame(records: Iterable[Any]) -> pd.DataFrame:
    """
    Materialize Execution records (or plain dicts) into the canonical frame.

    An empty iterable yields an empty frame that still carries
    EXECUTION_COLUMNS, so downstream groupby / count calls behave.
    """
    rows = [asdict(r) if is_dataclass(r) else dict(r) for r in records]
    if not rows:
        df = pd.DataFrame(
            {
                "notebook_id": pd.Series(dtype=object),
                "user_id": pd.Series(dtype=object),
                "code_cell_number": pd.Series(dtype=int),
                "success": pd.Series(dtype=bool),
                "timestamp": pd.Series(dtype="datetime64[ns]"),
                "runtime": pd.Series(dtype=float),
            }
        )
        return df[EXECUTION_COLUMNS]
    return normalize_executions(pd.DataFrame(rows))
