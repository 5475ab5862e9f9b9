"""
notebook_health/tests/conftest.py — Shared pytest fixtures.

Fixtures:
    as_of             — Fixed "now" so every window is deterministic.
    scenario_log      — Two-session, three-cell log with hand-computed metrics.
    scenario_notebook — The matching three-cell notebook.
    synthetic_frame   — Seeded random multi-notebook log (SEED=41).
    synthetic_log     — DataFrameExecutionLog over synthetic_frame.
    synthetic_notebooks — Inventory matching synthetic_log.
"""

from datetime import datetime, timedelta

import numpy as np
import pandas as pd
import pytest

from notebook_health.log.accessor import DataFrameExecutionLog
from notebook_health.log.executions import Execution
from notebook_health.models import Notebook

SEED = 41

AS_OF = datetime(2026, 3, 31, 12, 0, 0)


def make_execution(user, cell, success, when, notebook_id="nb-1", runtime=None):
    return Execution(
        user_id=user,
        code_cell_number=cell,
        success=success,
        timestamp=when,
        runtime=runtime,
        notebook_id=notebook_id,
    )


def scenario_records(notebook_id="nb-1"):
    """
    Session A (alice): cells 0, 1, 2 all succeed.
    Session B (bob, same day): cell 0 succeeds, cell 1 fails.

    Sessions: alice → (success 3, failure 3), bob → (success 1, failure 1).
    5 executions, 4 successes, 2 users.
    """
    day = AS_OF - timedelta(days=1)
    return [
        make_execution("alice", 0, True, day.replace(hour=9), notebook_id, 1.5),
        make_execution("alice", 1, True, day.replace(hour=9, minute=5), notebook_id, 2.5),
        make_execution("alice", 2, True, day.replace(hour=9, minute=10), notebook_id, 0.5),
        make_execution("bob", 0, True, day.replace(hour=14), notebook_id, 1.0),
        make_execution("bob", 1, False, day.replace(hour=14, minute=2), notebook_id, 0.1),
    ]



@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def scenario_notebook():
    return Notebook.from_cell_numbers("nb-1", [0, 1, 2], title="Scenario")


@pytest.fixture
def scenario_log():
    return DataFrameExecutionLog.from_records(scenario_records(), as_of=AS_OF)


def _build_synthetic_frame() -> pd.DataFrame:
    """
    Seeded log over four notebooks, all inside the last 55 days.

    nb-good     — high pass rate, users run to the end.
    nb-bad      — most runs fail at cell 1.
    nb-quiet    — a single user, a single run (low scale).
    nb-stale    — activity only older than 45 days.
    nb-empty    — no executions at all (present in inventory only).
    """
    rng = np.random.default_rng(SEED)
    rows = []

    def add(notebook_id, user, cell, success, days_ago, hour):
        rows.append(
            {
                "notebook_id": notebook_id,
                "user_id": user,
                "code_cell_number": cell,
                "success": success,
                "timestamp": AS_OF - timedelta(days=int(days_ago), hours=int(hour)),
                "runtime": float(rng.uniform(0.1, 5.0)),
            }
        )

    for i in range(40):
        user = f"user-{i % 12:02d}"
        days_ago = rng.integers(0, 25)
        hour = rng.integers(0, 8)
        for cell in range(5):
            add("nb-good", user, cell, bool(rng.random() > 0.03), days_ago, hour)

    for i in range(40):
        user = f"user-{i % 10:02d}"
        days_ago = rng.integers(0, 25)
        hour = rng.integers(0, 8)
        add("nb-bad", user, 0, bool(rng.random() > 0.5), days_ago, hour)
        add("nb-bad", user, 1, False, days_ago, hour)

    add("nb-quiet", "solo", 0, True, 2, 1)

    for i in range(10):
        add("nb-stale", f"user-{i:02d}", 0, True, 45 + i, 1)

    return pd.DataFrame(rows)


@pytest.fixture(scope="session")
def synthetic_frame():
    return _build_synthetic_frame()


@pytest.fixture
def synthetic_log(synthetic_frame):
    return DataFrameExecutionLog(synthetic_frame, as_of=AS_OF)


@pytest.fixture
def synthetic_notebooks():
    return {
        "nb-good": Notebook.from_cell_numbers("nb-good", range(5)),
        "nb-bad": Notebook.from_cell_numbers("nb-bad", range(4)),
        "nb-quiet": Notebook.from_cell_numbers("nb-quiet", range(3)),
        "nb-stale": Notebook.from_cell_numbers("nb-stale", range(2)),
        "nb-empty": Notebook.from_cell_numbers("nb-empty", range(3)),
        "nb-no-cells": Notebook("nb-no-cells"),
    }
