"""Dialog models for finding text, jumping to a cell and choosing sort keys."""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Tuple

from qtsheet.spreadsheet import SpreadsheetCompare

_CELL_REFERENCE = re.compile(r"[A-Za-z][1-9][0-9]{0,2}")

NONE_ITEM = "None"

FindCallback = Callable[[str, bool], object]


def is_cell_reference(text: str) -> bool:
    """Return True when *text* is a cell address such as ``B12``."""
    return _CELL_REFERENCE.fullmatch(text) is not None


def parse_cell_reference(text: str) -> Tuple[int, int]:
    """Turn a cell address into zero-based ``(row, column)``."""
    if not is_cell_reference(text):
        raise ValueError(f"not a cell reference: {text!r}")
    upper = text.upper()
    return int(upper[1:]) - 1, ord(upper[0]) - ord("A")


class FindDialog:
    """Search options; clicking Find reports the search to a callback."""

    title = "Find"

    def __init__(
        self,
        on_find_next: Optional[FindCallback] = None,
        on_find_previous: Optional[FindCallback] = None,
    ) -> None:
        self._on_find_next = on_find_next
        self._on_find_previous = on_find_previous
        self.text = ""
        self.case_sensitive = False
        self.search_backward = False
        self.find_enabled = False

    def set_text(self, text: str) -> None:
        """Change the search text; Find is enabled only for non-empty text."""
        self.text = text
        self.find_enabled = bool(text)

    def find_clicked(self):
        """Report the search forwards or backwards and return the callback's result.

        Nothing happens while the Find button is disabled.
        """
        if not self.find_enabled:
            return None
        callback = self._on_find_previous if self.search_backward else self._on_find_next
        if callback is None:
            return None
        return callback(self.text, self.case_sensitive)


class GoToCellDialog:
    """Entry of a cell address; OK is enabled only for a valid address."""

    def __init__(self) -> None:
        self.text = ""
        self.ok_enabled = False

    def set_text(self, text: str) -> None:
        self.text = text
        self.ok_enabled = is_cell_reference(text)

    def target(self) -> Tuple[int, int]:
        """Return the zero-based ``(row, column)`` that was entered."""
        return parse_cell_reference(self.text)


class SortDialog:
    """Choice of up to three sort columns within a column range and their orders."""

    def __init__(self) -> None:
        self.primary_columns: List[str] = []
        self.secondary_columns: List[str] = []
        self.tertiary_columns: List[str] = []
        self.primary_index = -1
        self.secondary_index = -1
        self.tertiary_index = -1
        self.primary_ascending = True
        self.secondary_ascending = True
        self.tertiary_ascending = True
        self.set_column_range("A", "Z")

    def set_column_range(self, first: str, last: str) -> None:
        """Offer the columns from *first* to *last*; secondary keys may be None."""
        if len(first) != 1 or len(last) != 1:
            raise ValueError("column bounds must be single characters")
        letters = [chr(code) for code in range(ord(first), ord(last) + 1)]
        self.primary_columns = list(letters)
        self.secondary_columns = [NONE_ITEM, *letters]
        self.tertiary_columns = [NONE_ITEM, *letters]
        self.primary_index = 0 if letters else -1
        self.secondary_index = 0
        self.tertiary_index = 0

    def compare(self) -> SpreadsheetCompare:
        """Build the row ordering the dialog describes, relative to the range."""
        for index, items in (
            (self.primary_index, self.primary_columns),
            (self.secondary_index, self.secondary_columns),
            (self.tertiary_index, self.tertiary_columns),
        ):
            if not 0 <= index < len(items):
                raise ValueError(f"selection {index} is outside the offered columns")
        return SpreadsheetCompare(
            keys=(
                self.primary_index,
                self.secondary_index - 1,
                self.tertiary_index - 1,
            ),
            ascending=(
                self.primary_ascending,
                self.secondary_ascending,
                self.tertiary_ascending,
            ),
        )