"""A small spreadsheet engine: formula cells, selection, find, sort, a binary file format and dialog logic."""

__version__ = "0.1.0"
__all__ = ["app", "cell", "concurrency", "dialogs", "runtime", "spreadsheet"]