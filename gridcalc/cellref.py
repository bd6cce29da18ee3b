"""Conversion between spreadsheet cell names (such as ``B12``) and flat indices."""

from __future__ import annotations

__all__ = [
    "CellReferenceError",
    "separate_cell",
    "get_column",
    "get_hash",
    "hash_to_string",
    "col_mapping",
]


class CellReferenceError(ValueError):
    """Raised when a cell name is malformed."""


def _is_upper(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def separate_cell(text: str) -> tuple[str, str]:
    """Split a cell name into its column letters and row digits."""
    letters: list[str] = []
    digits: list[str] = []
    for ch in text:
        if _is_upper(ch):
            if digits:
                raise CellReferenceError(
                    f"{text}: Digits cannot come before alphabets"
                )
            letters.append(ch)
        elif _is_digit(ch):
            digits.append(ch)
        else:
            raise CellReferenceError(
                f"{text}: Only uppercase alphabets and numbers allowed"
            )
    if not letters or not digits:
        raise CellReferenceError(
            f"{text}: Must contain both uppercase letters and digits"
        )
    return "".join(letters), "".join(digits)


def get_column(letters: str) -> int:
    """Return the 1-based column number for column letters (``A`` is 1)."""
    col = 0
    for ch in letters:
        col = col * 26 + (ord(ch) - ord("A") + 1)
    return col


def get_hash(text: str, cols: int) -> int:
    """Return the flat, 0-based index of the named cell in a grid ``cols`` wide."""
    letters, digits = separate_cell(text)
    row = int(digits) - 1
    if row < 0:
        raise CellReferenceError(f"{text}: Row number must be at least 1")
    col = get_column(letters) - 1
    return row * cols + col


def hash_to_string(index: int, cols: int) -> str:
    """Return the cell name for a flat index in a grid ``cols`` wide."""
    row, col = divmod(index, cols)
    return f"{col_mapping(col + 1)}{row + 1}"


def col_mapping(col: int) -> str:
    """Return the column letters for a 1-based column number."""
    letters: list[str] = []
    while col > 0:
        col, rem = divmod(col - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))