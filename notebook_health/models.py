"""
notebook_health/models.py — Notebook and CodeCell.

A Notebook is an ordered collection of code cells. Cell numbers are unique and
non-negative within a notebook, but numbering is not assumed to be gapless.

Author: notebook-health maintainers
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass(frozen=True)
class CodeCell:
    """A code cell, identified within its notebook by cell_number."""

    cell_number: int
    cell_id: Optional[str] = None


@dataclass
class Notebook:
    """
    Notebook identity plus its code cells.

    Fields:
        notebook_id: Identifier used to look up executions in the log.
        cells:       CodeCells, kept sorted by cell_number.
        title:       Display title (optional).

    Raises:
        ValueError: on duplicate or negative cell numbers.
    """

    notebook_id: str
    cells: list[CodeCell] = field(default_factory=list)
    title: str = ""

    def __post_init__(self):
        self.cells = sorted(self.cells, key=lambda c: c.cell_number)
        numbers = [c.cell_number for c in self.cells]
        if any(n < 0 for n in numbers):
            raise ValueError(
                f"Notebook '{self.notebook_id}' has negative cell numbers: "
                f"{[n for n in numbers if n < 0]}"
            )
        if len(set(numbers)) != len(numbers):
            dupes = sorted({n for n in numbers if numbers.count(n) > 1})
            raise ValueError(
                f"Notebook '{self.notebook_id}' has duplicate cell numbers: {dupes}"
            )

    @property
    def num_cells(self) -> int:
        return len(self.cells)

    @classmethod
    def from_cell_numbers(
        cls,
        notebook_id: str,
        cell_numbers: Iterable[int],
        title: str = "",
    ) -> "Notebook":
        return cls(
            notebook_id=notebook_id,
            cells=[CodeCell(cell_number=int(n)) for n in cell_numbers],
            title=title,
        )
