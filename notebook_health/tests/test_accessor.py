"""
notebook_health/tests/test_accessor.py — Tests for the execution log and providers.

Tests verify:
- Window filtering is as_of − window_days < timestamp <= as_of.
- Fetches return materialized copies with the canonical columns.
- recently_executed / recently_failed ordering.
- CSV loaders for executions, notebooks and cell statuses.
"""

from datetime import datetime, timedelta

import pandas as pd
import pytest

from notebook_health.log.accessor import (
    DataFrameExecutionLog,
    StaticCellStatusProvider,
    load_notebooks_csv,
)
from notebook_health.log.executions import (
    EXECUTION_COLUMNS,
    Execution,
    executions_frame,
    normalize_executions,
)
from notebook_health.metrics.score import HEALTHY, UNKNOWN
from notebook_health.models import CodeCell

AS_OF = datetime(2026, 3, 31, 12, 0)


def make_log():
    records = [
        Execution("u1", 0, True, AS_OF - timedelta(days=1), notebook_id="nb-a"),
        Execution("u1", 1, False, AS_OF - timedelta(days=3), notebook_id="nb-a"),
        Execution("u2", 0, True, AS_OF - timedelta(days=10), notebook_id="nb-b"),
        Execution("u3", 0, False, AS_OF - timedelta(days=40), notebook_id="nb-c"),
        Execution("u3", 0, True, AS_OF - timedelta(days=2), notebook_id="nb-c"),
    ]
    return DataFrameExecutionLog.from_records(records, as_of=AS_OF)


# ── Execution frame tests ─────────────────────────────────────────────────────

def test_empty_frame_has_canonical_columns():
    df = executions_frame([])
    assert list(df.columns) == EXECUTION_COLUMNS
    assert len(df) == 0


def test_normalize_coerces_string_success():
    df = normalize_executions(pd.DataFrame({
        "user_id": ["a", "b", "c"],
        "code_cell_number": ["0", "1", "2"],
        "success": ["true", "False", "1"],
        "timestamp": ["2026-03-30 10:00"] * 3,
    }))
    assert df["success"].tolist() == [True, False, True]
    assert df["code_cell_number"].tolist() == [0, 1, 2]
    assert df["notebook_id"].isna().all()


def test_normalize_missing_column_raises():
    with pytest.raises(ValueError, match="success"):
        normalize_executions(pd.DataFrame({
            "user_id": ["a"], "code_cell_number": [0], "timestamp": ["2026-03-30"],
        }))


# ── Window tests ──────────────────────────────────────────────────────────────

def test_fetch_filters_by_notebook_and_window():
    log = make_log()
    assert len(log.fetch_executions("nb-a", 30)) == 2
    assert len(log.fetch_executions("nb-a", 2)) == 1
    assert len(log.fetch_executions("nb-c", 30)) == 1
    assert len(log.fetch_executions("nb-c", None)) == 2


def test_window_lower_bound_is_exclusive():
    records = [Execution("u", 0, True, AS_OF - timedelta(days=7), notebook_id="nb")]
    log = DataFrameExecutionLog.from_records(records, as_of=AS_OF)
    assert len(log.fetch_executions("nb", 7)) == 0
    assert len(log.fetch_executions("nb", 8)) == 1


def test_window_upper_bound_is_as_of():
    records = [
        Execution("u", 0, True, AS_OF - timedelta(days=1), notebook_id="nb"),
        Execution("u", 1, True, AS_OF + timedelta(days=10), notebook_id="nb"),
        Execution("u", 2, True, AS_OF, notebook_id="nb"),
    ]
    log = DataFrameExecutionLog.from_records(records, as_of=AS_OF)
    assert log.fetch_executions("nb", 30)["code_cell_number"].tolist() == [0, 2]
    assert len(log.fetch_executions("nb", None)) == 2


def test_all_history_without_as_of_is_unbounded():
    records = [Execution("u", 0, True, AS_OF + timedelta(days=3650), notebook_id="nb")]
    log = DataFrameExecutionLog.from_records(records)
    assert len(log.fetch_executions("nb", None)) == 1


def test_negative_window_raises():
    with pytest.raises(ValueError):
        make_log().fetch_executions("nb-a", -1)


def test_fetch_returns_copy():
    log = make_log()
    df = log.fetch_executions("nb-a", 30)
    df.loc[:, "success"] = False
    assert log.fetch_executions("nb-a", 30)["success"].any()


def test_fetch_all_notebooks():
    assert len(make_log().fetch_executions(None, None)) == 5


def test_as_of_string_is_accepted():
    records = [Execution("u", 0, True, AS_OF - timedelta(days=1), notebook_id="nb")]
    log = DataFrameExecutionLog.from_records(records, as_of="2026-03-31T12:00:00")
    assert len(log.fetch_executions("nb", 30)) == 1


def test_tz_aware_log_with_naive_as_of():
    df = executions_frame([
        {"notebook_id": "nb", "user_id": "u", "code_cell_number": 0, "success": True,
         "timestamp": pd.Timestamp("2026-03-30 10:00", tz="UTC")},
    ])
    log = DataFrameExecutionLog(df, as_of="2026-03-31 12:00")
    assert len(log.fetch_executions("nb", 30)) == 1


# ── Listing tests ─────────────────────────────────────────────────────────────

def test_recently_executed_order():
    df = make_log().recently_executed()
    assert df["notebook_id"].tolist() == ["nb-a", "nb-c", "nb-b"]
    assert list(df.columns) == ["notebook_id", "last_exec"]


def test_recently_failed_order():
    df = make_log().recently_failed()
    assert df["notebook_id"].tolist() == ["nb-a", "nb-c"]


def test_recently_executed_limit():
    assert len(make_log().recently_executed(limit=1)) == 1


def test_recently_executed_zero_limit_is_empty():
    df = make_log().recently_executed(limit=0)
    assert len(df) == 0
    assert list(df.columns) == ["notebook_id", "last_exec"]


def test_unlabelled_log_serves_any_notebook():
    records = [Execution("u", 0, True, AS_OF - timedelta(days=1))]
    log = DataFrameExecutionLog.from_records(records, as_of=AS_OF)
    assert len(log.fetch_executions("whatever", 30)) == 1


def test_labelled_log_filters_unknown_notebook():
    assert len(make_log().fetch_executions("nb-z", 30)) == 0


def test_recently_failed_empty():
    records = [Execution("u", 0, True, AS_OF, notebook_id="nb")]
    df = DataFrameExecutionLog.from_records(records).recently_failed()
    assert len(df) == 0


# ── Cell status provider tests ────────────────────────────────────────────────

def test_static_provider_lookup_and_default():
    provider = StaticCellStatusProvider({("nb", 0): "Healthy"})
    assert provider.cell_status("nb", CodeCell(0), 30) == HEALTHY
    assert provider.cell_status("nb", CodeCell(1), 30) == UNKNOWN


def test_static_provider_coerces_unrecognised_status():
    provider = StaticCellStatusProvider({("nb", 0): "flaky"})
    assert provider.cell_status("nb", CodeCell(0), 30) == UNKNOWN


# ── CSV loader tests ──────────────────────────────────────────────────────────

def test_execution_log_from_csv(tmp_path):
    path = tmp_path / "executions.csv"
    path.write_text(
        "notebook_id,user_id,code_cell_number,success,timestamp,runtime\n"
        "001,7,0,true,2026-03-30 10:00:00,1.5\n"
        "001,7,1,false,2026-03-30 10:01:00,\n"
    )
    log = DataFrameExecutionLog.from_csv(str(path), as_of=AS_OF)
    df = log.fetch_executions("001", 30)
    assert len(df) == 2
    assert df["user_id"].tolist() == ["7", "7"]


def test_execution_log_from_missing_csv(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataFrameExecutionLog.from_csv(str(tmp_path / "nope.csv"))


def test_load_notebooks_csv(tmp_path):
    path = tmp_path / "notebooks.csv"
    path.write_text(
        "notebook_id,cell_number,title\n"
        "nb-a,1,Alpha\n"
        "nb-a,0,Alpha\n"
        "nb-b,,Empty\n"
    )
    notebooks = load_notebooks_csv(str(path))
    assert [c.cell_number for c in notebooks["nb-a"].cells] == [0, 1]
    assert notebooks["nb-a"].title == "Alpha"
    assert notebooks["nb-b"].num_cells == 0


def test_load_notebooks_csv_missing_column(tmp_path):
    path = tmp_path / "notebooks.csv"
    path.write_text("notebook_id,title\nnb-a,Alpha\n")
    with pytest.raises(ValueError):
        load_notebooks_csv(str(path))


def test_cell_status_from_csv(tmp_path):
    path = tmp_path / "cells.csv"
    path.write_text("notebook_id,cell_number,status\nnb-a,0,healthy\nnb-a,1,unhealthy\n")
    provider = StaticCellStatusProvider.from_csv(str(path))
    assert provider.cell_status("nb-a", CodeCell(1), 30) == "unhealthy"
