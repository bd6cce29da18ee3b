import pytest

from gridcalc.cellref import (
    CellReferenceError,
    col_mapping,
    get_column,
    get_hash,
    hash_to_string,
    separate_cell,
)


@pytest.mark.parametrize(
    "letters, expected",
    [("A", 1), ("Z", 26), ("AA", 27), ("AB", 28), ("BA", 53), ("ZZ", 702), ("AAA", 703)],
)
def test_get_column(letters, expected):
    assert get_column(letters) == expected


@pytest.mark.parametrize(
    "name, cols, expected",
    [
        ("A1", 5, 0),
        ("B2", 5, 6),
        ("E3", 5, 14),
        ("AA1", 30, 26),
        ("AB2", 40, 67),
        ("BA3", 80, 212),
        ("C10", 1000, 9002),
        ("Z99", 5000, 490025),
    ],
)
def test_get_hash(name, cols, expected):
    assert get_hash(name, cols) == expected


@pytest.mark.parametrize(
    "index, cols, expected",
    [
        (0, 5, "A1"),
        (6, 5, "B2"),
        (14, 5, "E3"),
        (26, 30, "AA1"),
        (67, 40, "AB2"),
        (212, 80, "BA3"),
        (902, 100, "C10"),
        (4925, 50, "Z99"),
    ],
)
def test_hash_to_string(index, cols, expected):
    assert hash_to_string(index, cols) == expected


@pytest.mark.parametrize("letters", ["A", "Z", "AA", "AB", "BA", "ZZ", "AAA", "XFD"])
def test_col_mapping_inverts_get_column(letters):
    assert col_mapping(get_column(letters)) == letters


def test_col_mapping_zero_is_empty():
    assert col_mapping(0) == ""


@pytest.mark.parametrize("index", range(0, 200, 7))
def test_hash_round_trip(index):
    assert get_hash(hash_to_string(index, 30), 30) == index


def test_separate_cell_splits():
    assert separate_cell("AB12") == ("AB", "12")


def test_separate_cell_digits_before_letters():
    with pytest.raises(CellReferenceError, match="Digits cannot come before alphabets"):
        separate_cell("A1B")


@pytest.mark.parametrize("text", ["a1", "A-1", "A 1", "A1!"])
def test_separate_cell_bad_characters(text):
    with pytest.raises(CellReferenceError, match="Only uppercase alphabets and numbers allowed"):
        separate_cell(text)


@pytest.mark.parametrize("text", ["", "ABC", "123"])
def test_separate_cell_missing_part(text):
    with pytest.raises(CellReferenceError, match="Must contain both uppercase letters and digits"):
        separate_cell(text)


def test_error_is_value_error():
    with pytest.raises(ValueError):
        get_hash("1A", 10)


def test_get_hash_row_zero_rejected():
    with pytest.raises(CellReferenceError):
        get_hash("A0", 10)