"""A terminal spreadsheet with integer cells, formulas and dependency tracking."""

__version__ = "0.1.0"