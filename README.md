# gridcalc

An interactive spreadsheet for the terminal. Every cell holds a signed
32-bit integer. A cell can hold a constant, simple arithmetic on cells and
numbers, a range function, or a timed `SLEEP`. When a cell changes, every
cell that depends on it is recalculated in dependency order. An assignment
that would create a cyclic dependency is rejected and the sheet is left as
it was.

## Installing

```
pip install .
```

## Starting a sheet

```
gridcalc ROWS COLUMNS
```

For example, `gridcalc 100 50` opens a sheet with 100 rows and 50 columns.
Columns are named `A`, `B`, ..., `Z`, `AA`, `AB`, ...; rows are numbered
from 1. Run `gridcalc about` for a short description; any other number of
arguments prints a usage line. A size that is not a non-negative integer
stops the program with a message.

After every command a window of up to 10 × 10 cells is drawn, followed by a
prompt showing how long the command took and its status:

```
[0.0] (ok) >
```

If a command cannot be accepted, the reason is shown in place of `ok`.
A cell whose value cannot be computed (for example after a division by
zero, or one that depends on such a cell) is shown as `ERR`.

## Commands

| Input              | Effect                                              |
|--------------------|-----------------------------------------------------|
| `A1=5`             | constant                                            |
| `A1=2*3`           | constant computed from two numbers                  |
| `B1=A1`            | copy of another cell                                |
| `B1=A1+3`          | arithmetic with `+ - * /` on a cell and a number    |
| `C1=A1*B1`         | arithmetic on two cells                             |
| `D1=SUM(A1:C3)`    | `MIN`, `MAX`, `SUM`, `AVG`, `STDEV` over a range    |
| `E1=SLEEP(2)`      | wait the given seconds, then take that value        |
| `E2=SLEEP(A1)`     | wait as many seconds as `A1` holds                  |
| `w` `a` `s` `d`    | scroll up, left, down, right by 10                  |
| `scroll_to B20`    | put `B20` at the top-left of the view               |
| `disable_output`   | stop drawing the sheet                              |
| `enable_output`    | draw the sheet again                                |
| `q`                | quit                                                |

Cell names and function names are written in upper case. A range is given
by its top-left and bottom-right corners. Division, including `AVG`, is
integer division rounding toward zero, and results wrap around at 32 bits.
`STDEV` yields a variance rounded to the nearest integer rather than a
square root.

## Using it from Python

```python
from gridcalc.sheet import Sheet
from gridcalc.parsing import parse_input
from gridcalc.display import render_sheet

sheet = Sheet(3, 3)
parse_input("A1=4", sheet)
parse_input("B1=A1*2", sheet)
print(render_sheet(sheet))
print(sheet.cells[1].value)  # 8
```

- `gridcalc.parsing.parse_input(text, sheet)` applies one `CELL=FORMULA`
  command; it raises `gridcalc.parsing.InputError` for malformed input or
  a cyclic dependency. `is_valid_cell(text, sheet)` raises the same error
  unless the name lies inside the sheet.
- `gridcalc.sheet.Sheet` holds the cells (`sheet.cells`, row by row, each a
  `Cell` with `value` and `is_valid`) and the view: `scroll_up`,
  `scroll_down`, `scroll_left`, `scroll_right`, `scroll_to`,
  `enable_display`, `disable_display`.
- `gridcalc.display.render_sheet(sheet)` returns the visible window as text;
  `display_sheet(sheet, out)` writes it to a stream (standard output by
  default).
- `gridcalc.cellref.get_hash` and `hash_to_string` convert cell names to
  and from flat indices; `get_column` and `col_mapping` convert column
  letters to and from numbers.
- `gridcalc.evaluation` holds the dependency tracking and recalculation
  used by `parse_input`.

## What it does not do

Sheets live only in memory: there is no saving or loading, no undo, and no
values other than integers (no text, no decimals).

## Running the tests

```
pip install .[test]
pytest
```