"""Parsing of ``CELL=FORMULA`` commands and applying them to a sheet."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from gridcalc.cellref import CellReferenceError, get_column, get_hash, separate_cell
from gridcalc.evaluation import add_edges, check_cycle, delete_edges, recalculate
from gridcalc.sheet import CellType, Sheet

__all__ = ["InputError", "parse_input", "is_valid_cell"]

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_FUNCTION_NAMES = frozenset({"MIN", "MAX", "AVG", "STDEV", "SLEEP", "SUM"})
_RANGE_FUNCTIONS = {
    "MIN": CellType.MIN,
    "MAX": CellType.MAX,
    "SUM": CellType.SUM,
    "AVG": CellType.AVG,
    "STDEV": CellType.STDEV,
}

_INTEGER = re.compile(r"[+-]?[0-9]+")
_BINARY = re.compile(
    r"([A-Za-z]+[0-9]+|-?[0-9]+)\s*([+\-*/])\s*([A-Za-z]+[0-9]+|-?[0-9]+)"
)


class InputError(ValueError):
    """Raised when a command cannot be applied to the sheet."""


class _RhsKind(enum.Enum):
    NUMBER = enum.auto()
    ARITHMETIC = enum.auto()
    RANGE = enum.auto()
    SLEEP = enum.auto()


@dataclass
class _Formula:
    kind: CellType = CellType.CONSTANT
    operator: str | None = None
    op_val: int | None = None
    cell1: int | None = None
    cell2: int | None = None


def _wrap(value: int) -> int:
    return (value - _INT_MIN) % 2**32 + _INT_MIN


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return _wrap(quotient if (a < 0) == (b < 0) else -quotient)


def _as_int(text: str) -> int | None:
    """Return ``text`` as a 32-bit signed integer, or ``None`` if it is not one."""
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if _INT_MIN <= value <= _INT_MAX else None


def is_valid_cell(text: str, sheet: Sheet) -> None:
    """Raise :class:`InputError` unless ``text`` names a cell inside ``sheet``."""
    try:
        letters, digits = separate_cell(text)
    except CellReferenceError as err:
        raise InputError(str(err)) from None
    row = int(digits)
    col = get_column(letters)
    if row > sheet.rows:
        raise InputError(
            f"{text}: Row number cannot be greater than the number of rows."
        )
    if col > sheet.cols:
        raise InputError(
            f"{text}: Column number cannot be greater than the number of columns."
        )
    if row < 1:
        raise InputError(f"{text}: Row number must be at least 1")


def _is_cell(text: str, sheet: Sheet) -> bool:
    try:
        is_valid_cell(text, sheet)
    except InputError:
        return False
    return True


def _split_binary(text: str) -> tuple[str, str, str] | None:
    match = _BINARY.fullmatch(text.strip())
    if match is None:
        return None
    left, op, right = match.groups()
    return left.strip(), op, right.strip()


def _split_call(text: str) -> tuple[str, str] | None:
    text = text.strip()
    opening = text.find("(")
    closing = text.rfind(")")
    if opening < 0 or closing < 0 or opening > closing:
        return None
    name = text[:opening].strip()
    arg = text[opening + 1 : closing].strip()
    if not name or not arg:
        return None
    return name, arg


def _check_range(text: str, sheet: Sheet) -> None:
    start, sep, end = text.partition(":")
    if not sep:
        raise InputError("Missing ':' in the input")
    is_valid_cell(start, sheet)
    is_valid_cell(end, sheet)
    letters1, digits1 = separate_cell(start)
    letters2, digits2 = separate_cell(end)
    if int(digits1) > int(digits2) or get_column(letters1) > get_column(letters2):
        raise InputError(f"{text}: Range is invalid")


def _classify(rhs: str, sheet: Sheet) -> _RhsKind:
    invalid = InputError(f"{rhs}: Invalid RHS.")
    opened = closed = 0
    for ch in rhs:
        if ch == "(":
            if closed > opened:
                raise invalid
            opened += 1
        elif ch == ")":
            closed += 1
    if opened != closed or opened > 1:
        raise invalid

    if opened == 0:
        if _as_int(rhs) is not None:
            return _RhsKind.NUMBER
        if _is_cell(rhs, sheet):
            return _RhsKind.ARITHMETIC
        parts = _split_binary(rhs)
        if parts is None:
            raise invalid
        left, _, right = parts
        for operand in (left, right):
            if _as_int(operand) is None:
                is_valid_cell(operand, sheet)
        return _RhsKind.ARITHMETIC

    call = _split_call(rhs)
    if call is None:
        raise invalid
    name, arg = call
    if name.strip().upper() not in _FUNCTION_NAMES:
        raise InputError(f"{name}: Not a valid function name.")
    if name == "SLEEP":
        if _is_cell(arg, sheet) or _as_int(arg) is not None:
            return _RhsKind.SLEEP
        raise invalid
    _check_range(arg, sheet)
    return _RhsKind.RANGE


def _fold_constants(left: int, op: str, right: int) -> _Formula:
    if op == "+":
        return _Formula(op_val=_wrap(left + right))
    if op == "-":
        return _Formula(op_val=_wrap(left - right))
    if op == "*":
        return _Formula(op_val=_wrap(left * right))
    if right == 0:
        return _Formula(op_val=None)
    return _Formula(op_val=_trunc_div(left, right))


def _arithmetic_formula(rhs: str, sheet: Sheet) -> _Formula:
    cols = sheet.cols
    if _is_cell(rhs, sheet):
        return _Formula(
            CellType.ARITHMETIC, "+", op_val=0, cell1=get_hash(rhs, cols)
        )
    parts = _split_binary(rhs)
    if parts is None:
        raise InputError(f"{rhs}: Invalid RHS.")
    left, op, right = parts
    left_num, right_num = _as_int(left), _as_int(right)
    if left_num is not None and right_num is not None:
        return _fold_constants(left_num, op, right_num)
    if left_num is not None:
        return _Formula(
            CellType.ARITHMETIC, op, op_val=left_num, cell1=get_hash(right, cols)
        )
    if right_num is not None:
        return _Formula(
            CellType.ARITHMETIC, op, op_val=right_num, cell1=get_hash(left, cols)
        )
    return _Formula(
        CellType.ARITHMETIC,
        op,
        cell1=get_hash(left, cols),
        cell2=get_hash(right, cols),
    )


def _build_formula(rhs: str, kind: _RhsKind, sheet: Sheet) -> _Formula:
    if kind is _RhsKind.NUMBER:
        return _Formula(op_val=_as_int(rhs))
    if kind is _RhsKind.ARITHMETIC:
        return _arithmetic_formula(rhs, sheet)
    call = _split_call(rhs)
    if call is None:
        raise InputError(f"{rhs}: Invalid RHS.")
    name, arg = call
    if kind is _RhsKind.SLEEP:
        if _is_cell(arg, sheet):
            return _Formula(CellType.SLEEP, cell1=get_hash(arg, sheet.cols))
        return _Formula(CellType.SLEEP, op_val=_as_int(arg))
    start, _, end = arg.partition(":")
    return _Formula(
        _RANGE_FUNCTIONS.get(name, CellType.CONSTANT),
        cell1=get_hash(start, sheet.cols),
        cell2=get_hash(end, sheet.cols),
    )


def parse_input(text: str, sheet: Sheet) -> None:
    """Apply a ``CELL=FORMULA`` command to ``sheet`` and recompute what depends on it.

    Raises :class:`InputError` for malformed commands and cyclic formulas;
    the sheet is left unchanged in that case.
    """
    lhs, sep, rhs = text.partition("=")
    if not sep:
        raise InputError("Missing '=' in the input")
    is_valid_cell(lhs, sheet)
    kind = _classify(rhs, sheet)
    formula = _build_formula(rhs, kind, sheet)
    index = get_hash(lhs, sheet.cols)
    try:
        order = check_cycle(sheet, index, formula.kind, formula.cell1, formula.cell2)
    except ValueError as err:
        raise InputError(str(err)) from None

    delete_edges(sheet, index)
    cell = sheet.cells[index]
    cell.kind = formula.kind
    cell.operator = formula.operator
    cell.op_val = formula.op_val
    cell.cell1 = formula.cell1
    cell.cell2 = formula.cell2
    add_edges(sheet, index)
    recalculate(sheet, order)