"""The spreadsheet grid: cells, their formulas and the visible window."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from gridcalc.cellref import get_column, separate_cell

__all__ = ["CellType", "Cell", "Sheet"]

VIEW_SIZE = 10


class CellType(enum.Enum):
    """The kind of formula a cell holds."""

    CONSTANT = "constant"
    ARITHMETIC = "arithmetic"
    MIN = "min"
    MAX = "max"
    SUM = "sum"
    AVG = "avg"
    STDEV = "stdev"
    SLEEP = "sleep"


@dataclass
class Cell:
    """One cell: its formula, its current value and the cells depending on it.

    ``operator`` is set for arithmetic cells (one of ``+ - * /``).
    ``op_val`` is the constant operand, ``cell1``/``cell2`` the referenced
    cell indices (the corners of the range for range functions).
    """

    index: int
    kind: CellType = CellType.CONSTANT
    operator: str | None = None
    value: int = 0
    is_valid: bool = True
    out_neighbors: list[int] = field(default_factory=list)
    op_val: int | None = None
    cell1: int | None = None
    cell2: int | None = None


class Sheet:
    """A grid of ``rows`` by ``cols`` cells stored row by row."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self.cells: list[Cell] = [Cell(index) for index in range(rows * cols)]
        self.is_display = True
        self.row_top = 0
        self.col_top = 0

    def __repr__(self) -> str:
        return f"Sheet(rows={self.rows}, cols={self.cols})"

    def scroll_up(self) -> None:
        """Move the view up by one page."""
        self.row_top = max(self.row_top - VIEW_SIZE, 0)

    def scroll_down(self) -> None:
        """Move the view down by one page, stopping at the last full page."""
        self.row_top = min(self.row_top + VIEW_SIZE, max(self.rows - VIEW_SIZE, 0))

    def scroll_left(self) -> None:
        """Move the view left by one page."""
        self.col_top = max(self.col_top - VIEW_SIZE, 0)

    def scroll_right(self) -> None:
        """Move the view right by one page, stopping at the last full page."""
        self.col_top = min(self.col_top + VIEW_SIZE, max(self.cols - VIEW_SIZE, 0))

    def enable_display(self) -> None:
        self.is_display = True

    def disable_display(self) -> None:
        self.is_display = False

    def scroll_to(self, ref: str) -> None:
        """Put the named cell at the top-left corner of the view."""
        letters, digits = separate_cell(ref)
        self.row_top = int(digits) - 1
        self.col_top = get_column(letters) - 1