"""Interactive terminal front end for the spreadsheet."""

from __future__ import annotations

import re
import sys
import time
from collections.abc import Callable, Sequence

from gridcalc.display import display_sheet
from gridcalc.parsing import InputError, is_valid_cell, parse_input
from gridcalc.sheet import Sheet

__all__ = ["USAGE", "ABOUT_TEXT", "main"]

USAGE = (
    "To use sheet enter: gridcalc <rows> <columns>. "
    "If you want to know more about the product run: gridcalc about"
)
ABOUT_TEXT = (
    "Hey! This is a terminal spreadsheet that provides excel functionality. "
    "Hope you enjoy the product!"
)

_DIMENSION = re.compile(r"\+?[0-9]+")

_VIEW_COMMANDS: dict[str, Callable[[Sheet], None]] = {
    "w": Sheet.scroll_up,
    "a": Sheet.scroll_left,
    "s": Sheet.scroll_down,
    "d": Sheet.scroll_right,
    "disable_output": Sheet.disable_display,
    "enable_output": Sheet.enable_display,
}


def _parse_dimension(text: str, what: str) -> int:
    if not _DIMENSION.fullmatch(text) or int(text) >= 2**32:
        raise SystemExit(f"Please enter a valid positive integer for {what}.")
    return int(text)


def _run_command(command: str, sheet: Sheet) -> str | None:
    """Execute one command; return an error message or ``None`` on success."""
    lowered = command.lower()
    action = _VIEW_COMMANDS.get(lowered)
    if action is not None:
        action(sheet)
        return None
    try:
        if lowered.startswith("scroll_to"):
            words = command.split()
            target = words[1] if len(words) > 1 else ""
            is_valid_cell(target, sheet)
            sheet.scroll_to(target)
        else:
            parse_input(command, sheet)
    except InputError as err:
        return str(err)
    return None


def _prompt(elapsed: float, error: str | None) -> None:
    print(f"[{elapsed:.1f}] ({error or 'ok'}) > ", end="", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive spreadsheet session."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) == 1 and args[0].lower() == "about":
        print(ABOUT_TEXT)
        return 0
    if len(args) != 2:
        print(USAGE)
        return 0
    rows = _parse_dimension(args[0], "rows")
    cols = _parse_dimension(args[1], "columns")

    started = time.perf_counter()
    sheet = Sheet(rows, cols)
    display_sheet(sheet, sys.stdout)
    _prompt(time.perf_counter() - started, None)

    for line in iter(sys.stdin.readline, ""):
        command = line.strip()
        started = time.perf_counter()
        if command.lower() == "q":
            break
        error = _run_command(command, sheet)
        elapsed = time.perf_counter() - started
        display_sheet(sheet, sys.stdout)
        _prompt(elapsed, error)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())