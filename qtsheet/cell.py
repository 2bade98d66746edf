"""Spreadsheet cells: a formula, its evaluation and a cached value."""

from __future__ import annotations

import enum
import math
import re
from typing import Callable, Optional, Union

Value = Union[float, str, None]
"""A cell value: a number, a text, or ``None`` when the formula is invalid."""

Lookup = Callable[[int, int], Optional["Cell"]]

INVALID_TEXT = "####"

_END = "\0"
_REFERENCE = re.compile(r"[A-Za-z][1-9][0-9]{0,2}")
_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Alignment(enum.Enum):
    """Horizontal alignment of a cell's displayed text."""

    LEFT = "left"
    RIGHT = "right"


def _to_double(text: str) -> Optional[float]:
    """Parse a number the way the sheet accepts it, or return None."""
    stripped = text.strip()
    if not _NUMBER.fullmatch(stripped):
        return None
    number = float(stripped)
    return number if math.isfinite(number) else None


def _format_number(number: float) -> str:
    text = repr(number)
    return text[:-2] if text.endswith(".0") else text


class _Parser:
    """Recursive-descent evaluator for ``=`` formulas."""

    def __init__(self, text: str, lookup: Optional[Lookup]) -> None:
        self._text = text
        self._pos = 0
        self._lookup = lookup

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else _END

    def parse(self) -> Value:
        result = self._expression()
        return result if self._peek() == _END else None

    def _expression(self) -> Value:
        result = self._term()
        while (op := self._peek()) in ("+", "-"):
            self._pos += 1
            term = self._term()
            if isinstance(result, float) and isinstance(term, float):
                result = result + term if op == "+" else result - term
            else:
                result = None
        return result

    def _term(self) -> Value:
        result = self._factor()
        while (op := self._peek()) in ("*", "/"):
            self._pos += 1
            factor = self._factor()
            if isinstance(result, float) and isinstance(factor, float):
                if op == "*":
                    result = result * factor
                elif factor == 0.0:
                    result = None
                else:
                    result = result / factor
            else:
                result = None
        return result

    def _factor(self) -> Value:
        negative = self._peek() == "-"
        if negative:
            self._pos += 1

        result: Value
        if self._peek() == "(":
            self._pos += 1
            result = self._expression()
            if self._peek() != ")":
                result = None
            self._pos += 1
        else:
            start = self._pos
            while (ch := self._peek()).isalnum() or ch == ".":
                self._pos += 1
            token = self._text[start:self._pos]
            if _REFERENCE.fullmatch(token):
                column = ord(token[0].upper()) - ord("A")
                row = int(token[1:]) - 1
                cell = self._lookup(row, column) if self._lookup else None
                result = cell.value() if cell is not None else 0.0
            else:
                result = _to_double(token)

        if negative:
            result = -result if isinstance(result, float) else None
        return result


class Cell:
    """One spreadsheet cell; *lookup* resolves references to other cells."""

    def __init__(self, lookup: Optional[Lookup] = None) -> None:
        self._lookup = lookup
        self._formula = ""
        self._cached: Value = None
        self._dirty = True

    @property
    def formula(self) -> str:
        return self._formula

    @formula.setter
    def formula(self, text: str) -> None:
        self._formula = text
        self.set_dirty()

    def clone(self) -> "Cell":
        """Return an independent copy of this cell, cache included."""
        twin = Cell(self._lookup)
        twin._formula = self._formula
        twin._cached = self._cached
        twin._dirty = self._dirty
        return twin

    def set_dirty(self) -> None:
        """Force the value to be recomputed on next access."""
        self._dirty = True

    def value(self) -> Value:
        """Return the (cached) value of the formula."""
        if self._dirty:
            self._dirty = False
            # Invalid while computing, so a self-reference evaluates as invalid.
            self._cached = None
            self._cached = self._compute()
        return self._cached

    def _compute(self) -> Value:
        text = self._formula
        if text.startswith("'"):
            return text[1:]
        if text.startswith("="):
            return _Parser(text[1:].replace(" ", ""), self._lookup).parse()
        number = _to_double(text)
        return text if number is None else number

    def display_text(self) -> str:
        """Return the text shown for this cell."""
        value = self.value()
        if value is None:
            return INVALID_TEXT
        if isinstance(value, float):
            return _format_number(value)
        return value

    def alignment(self) -> Alignment:
        """Texts align left; numbers and invalid values align right."""
        return Alignment.LEFT if isinstance(self.value(), str) else Alignment.RIGHT