"""
notebook_health/metrics/cells.py — Notebook-level cell metrics.

How each individual cell is classified is decided elsewhere (see
notebook_health.log.accessor.CellStatusProvider). This module only aggregates
the per-cell statuses, scanning cells in increasing cell_number order:

    first_bad_cell_fraction = cell_number of the first unhealthy cell / total
                              1.0 if no cell is unhealthy
    last_good_cell_fraction = (cell_number + 1) of the last healthy cell / total
                              0.0 if no cell is healthy

Both fractions are left undefined (None) for a notebook with no cells.

Author: notebook-health maintainers
"""

import logging
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from notebook_health.metrics.score import HEALTHY, UNHEALTHY

logger = logging.getLogger(__name__)


@dataclass
class CellMetrics:
    """
    Aggregated per-cell health for one notebook window.

    Fields:
        total_cells:             Cells scanned.
        healthy_cells:           Cells with status 'healthy'.
        unhealthy_cells:         Cells with status 'unhealthy'.
        unknown_cells:           Every other cell.
        first_bad_cell_fraction: See module docstring. None if total_cells == 0.
        last_good_cell_fraction: See module docstring. None if total_cells == 0.
    """

    total_cells: int = 0
    healthy_cells: int = 0
    unhealthy_cells: int = 0
    unknown_cells: int = 0
    first_bad_cell_fraction: Optional[float] = None
    last_good_cell_fraction: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


def compute_cell_metrics(
    cell_statuses: Iterable[tuple[int, str]],
) -> CellMetrics:
    """
    Tally per-cell statuses and locate the first bad / last good cell.

    Args:
        cell_statuses: (cell_number, status) pairs, one per code cell. Order
                       does not matter; pairs are scanned by cell_number.

    Returns:
        CellMetrics.
    """
    metrics = CellMetrics()
    first_bad_cell: Optional[int] = None
    last_good_cell = 0

    for cell_number, status in sorted(cell_statuses, key=lambda pair: pair[0]):
        metrics.total_cells += 1
        if status == HEALTHY:
            metrics.healthy_cells += 1
            last_good_cell = cell_number + 1
        elif status == UNHEALTHY:
            metrics.unhealthy_cells += 1
            if first_bad_cell is None:
                first_bad_cell = cell_number
        else:
            metrics.unknown_cells += 1

    if metrics.total_cells > 0:
        metrics.first_bad_cell_fraction = (
            first_bad_cell / metrics.total_cells if first_bad_cell is not None else 1.0
        )
        metrics.last_good_cell_fraction = last_good_cell / metrics.total_cells

    logger.debug(
        "Cell metrics: %d cells (%d healthy, %d unhealthy, %d unknown).",
        metrics.total_cells,
        metrics.healthy_cells,
        metrics.unhealthy_cells,
        metrics.unknown_cells,
    )
    return metrics


def count_unhealthy_cells(cell_statuses: Iterable[tuple[int, str]]) -> int:
    """Number of cells classified 'unhealthy'."""
    return sum(1 for _, status in cell_statuses if status == UNHEALTHY)
