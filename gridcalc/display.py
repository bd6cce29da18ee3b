"""Text rendering of the visible part of a sheet."""

from __future__ import annotations

import sys
from typing import TextIO

from gridcalc.cellref import col_mapping
from gridcalc.sheet import VIEW_SIZE, Sheet

__all__ = ["render_sheet", "display_sheet"]

_WIDTH = 12


def render_sheet(sheet: Sheet) -> str:
    """Return the visible window of ``sheet`` as text, or ``""`` if display is off."""
    if not sheet.is_display:
        return ""
    col_span = range(sheet.col_top, min(sheet.col_top + VIEW_SIZE, sheet.cols))
    row_span = range(sheet.row_top, min(sheet.row_top + VIEW_SIZE, sheet.rows))
    lines = ["   " + "".join(f"{col_mapping(col + 1):>{_WIDTH}}" for col in col_span)]
    for row in row_span:
        cells = (sheet.cells[row * sheet.cols + col] for col in col_span)
        lines.append(
            f"{row + 1:>3}"
            + "".join(
                f"{cell.value if cell.is_valid else 'ERR':>{_WIDTH}}" for cell in cells
            )
        )
    return "\n".join(lines) + "\n"


def display_sheet(sheet: Sheet, out: TextIO | None = None) -> None:
    """Write the visible window of ``sheet`` to ``out`` (standard output by default)."""
    (sys.stdout if out is None else out).write(render_sheet(sheet))