"""
notebook_health/metrics/pass_rate.py — Overall execution pass rate.

pass_rate = successful executions / all executions, over exactly the frame
passed in. The reporter hands the same window frame to every metric so that
no execution is counted twice or resampled.

Author: notebook-health maintainers
"""

import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)


def compute_pass_rate(df_exec: pd.DataFrame) -> Optional[float]:
    """
    Fraction of executions in df_exec that succeeded.

    Returns:
        pass_rate in [0.0, 1.0], or None when df_exec has no rows.
    """
    num_executions = len(df_exec)
    if num_executions == 0:
        return None
    num_success = int(df_exec["success"].sum())
    return num_success / num_executions
