"""A grid of formula cells with selection, clipboard, search, sort and file I/O."""

from __future__ import annotations

import functools
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from qtsheet.cell import Cell

MAGIC_NUMBER = 0x7F51C883
ROW_COUNT = 999
COLUMN_COUNT = 26
KEY_COUNT = 3

_NULL_STRING = 0xFFFFFFFF
_RECORD_HEADER = struct.Struct(">HHI")
_MAGIC = struct.Struct(">I")


class SpreadsheetError(Exception):
    """Raised when a sheet operation cannot be carried out."""


@dataclass(frozen=True)
class SelectionRange:
    """An inclusive rectangle of cells; the default range is empty."""

    top_row: int = -1
    left_column: int = -1
    bottom_row: int = -2
    right_column: int = -2

    @property
    def row_count(self) -> int:
        return self.bottom_row - self.top_row + 1

    @property
    def column_count(self) -> int:
        return self.right_column - self.left_column + 1


@dataclass(frozen=True)
class SpreadsheetCompare:
    """Row ordering by up to three key columns; -1 disables a key."""

    keys: Tuple[int, ...] = (0, -1, -1)
    ascending: Tuple[bool, ...] = (True, True, True)

    def __post_init__(self) -> None:
        if len(self.keys) != KEY_COUNT or len(self.ascending) != KEY_COUNT:
            raise ValueError(f"exactly {KEY_COUNT} keys and orders are required")

    def __call__(self, row1: Sequence[str], row2: Sequence[str]) -> bool:
        """Return True when *row1* sorts before *row2*."""
        for column, ascending in zip(self.keys, self.ascending):
            if column == -1:
                continue
            first, second = row1[column], row2[column]
            if first != second:
                return first < second if ascending else first > second
        return False


def _decode_records(data: bytes, offset: int) -> Iterator[Tuple[int, int, str]]:
    while offset < len(data):
        if offset + _RECORD_HEADER.size > len(data):
            raise SpreadsheetError("The file is truncated.")
        row, column, length = _RECORD_HEADER.unpack_from(data, offset)
        offset += _RECORD_HEADER.size
        if length == _NULL_STRING:
            yield row, column, ""
            continue
        if length % 2 or offset + length > len(data):
            raise SpreadsheetError("The file is truncated.")
        text = data[offset:offset + length].decode("utf-16-be", "surrogatepass")
        offset += length
        yield row, column, text


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return needle in haystack
    return needle.casefold() in haystack.casefold()


class Spreadsheet:
    """A sheet of ROW_COUNT x COLUMN_COUNT formula cells."""

    def __init__(self) -> None:
        self._cells: dict[Tuple[int, int], Cell] = {}
        self._auto_recalc = True
        self._current: Optional[Tuple[int, int]] = None
        self._selection: Optional[SelectionRange] = None
        self.clipboard = ""
        self.modified_listeners: List[Callable[[], None]] = []
        self.current_cell_listeners: List[Callable[[], None]] = []
        self.clear()

    @property
    def auto_recalculate(self) -> bool:
        return self._auto_recalc

    @property
    def current_row(self) -> int:
        return self._current[0] if self._current else -1

    @property
    def current_column(self) -> int:
        return self._current[1] if self._current else -1

    def current_location(self) -> str:
        """Return the current cell's address, such as ``B3``."""
        return chr(ord("A") + self.current_column) + str(self.current_row + 1)

    def current_formula(self) -> str:
        return self.formula(self.current_row, self.current_column)

    def selected_range(self) -> SelectionRange:
        return self._selection or SelectionRange()

    @staticmethod
    def _check_position(row: int, column: int) -> None:
        if not (0 <= row < ROW_COUNT and 0 <= column < COLUMN_COUNT):
            raise IndexError(f"cell ({row}, {column}) is outside the sheet")

    def set_current_cell(self, row: int, column: int) -> None:
        """Move to a cell and make it the whole selection."""
        self._check_position(row, column)
        changed = self._current != (row, column)
        self._current = (row, column)
        self._selection = SelectionRange(row, column, row, column)
        if changed:
            for listener in self.current_cell_listeners:
                listener()

    def select_range(
        self, top_row: int, left_column: int, bottom_row: int, right_column: int
    ) -> None:
        self._check_position(top_row, left_column)
        self._check_position(bottom_row, right_column)
        if bottom_row < top_row or right_column < left_column:
            raise ValueError("selection corners are out of order")
        self._selection = SelectionRange(top_row, left_column, bottom_row, right_column)

    def clear_selection(self) -> None:
        self._selection = None

    def clear(self) -> None:
        """Remove every cell and go back to the first cell."""
        self._cells.clear()
        self._selection = None
        self._current = None
        self.set_current_cell(0, 0)

    def read_file(self, path) -> None:
        """Replace the sheet's contents with those stored in *path*."""
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise SpreadsheetError(f"Cannot read file {path}:\n{exc.strerror}.") from exc
        if len(data) < _MAGIC.size or _MAGIC.unpack_from(data)[0] != MAGIC_NUMBER:
            raise SpreadsheetError("The file is not a Spreadsheet file.")
        records = list(_decode_records(data, _MAGIC.size))
        self.clear()
        for row, column, formula in records:
            if row < ROW_COUNT and column < COLUMN_COUNT:
                self.set_formula(row, column, formula)

    def write_file(self, path) -> None:
        """Store every non-empty formula in *path*."""
        chunks = [_MAGIC.pack(MAGIC_NUMBER)]
        for (row, column), cell in sorted(self._cells.items()):
            if not cell.formula:
                continue
            encoded = cell.formula.encode("utf-16-be", "surrogatepass")
            chunks.append(_RECORD_HEADER.pack(row, column, len(encoded)))
            chunks.append(encoded)
        try:
            Path(path).write_bytes(b"".join(chunks))
        except OSError as exc:
            raise SpreadsheetError(f"Cannot write file {path}:\n{exc.strerror}.") from exc

    def _range_rows(self, area: SelectionRange) -> List[List[str]]:
        return [
            [self.formula(row, column)
             for column in range(area.left_column, area.right_column + 1)]
            for row in range(area.top_row, area.bottom_row + 1)
        ]

    def sort(self, compare: SpreadsheetCompare) -> None:
        """Stably sort the rows of the selected range."""
        area = self.selected_range()

        def order(first: Sequence[str], second: Sequence[str]) -> int:
            if compare(first, second):
                return -1
            if compare(second, first):
                return 1
            return 0

        rows = sorted(self._range_rows(area), key=functools.cmp_to_key(order))
        for row, values in zip(range(area.top_row, area.bottom_row + 1), rows):
            for column, formula in zip(
                range(area.left_column, area.right_column + 1), values
            ):
                self.set_formula(row, column, formula)
        self.clear_selection()
        self._something_changed()

    def cut(self) -> None:
        self.copy()
        self.delete()

    def copy(self) -> None:
        """Put the selection's formulas on the clipboard, tab and newline separated."""
        rows = self._range_rows(self.selected_range())
        self.clipboard = "\n".join("\t".join(row) for row in rows)

    def paste(self) -> None:
        """Write the clipboard into the selection."""
        area = self.selected_range()
        rows = self.clipboard.split("\n")
        row_count = len(rows)
        column_count = rows[0].count("\t") + 1
        if area.row_count * area.column_count != 1 and (
            area.row_count != row_count or area.column_count != column_count
        ):
            raise SpreadsheetError(
                "The information cannot be pasted because the copy "
                "and paste areas aren't the same size."
            )
        for row, line in enumerate(rows, start=area.top_row):
            columns = line.split("\t")
            for offset in range(column_count):
                column = area.left_column + offset
                if row < ROW_COUNT and column < COLUMN_COUNT:
                    text = columns[offset] if offset < len(columns) else ""
                    self.set_formula(row, column, text)
        self._something_changed()

    def delete(self) -> None:
        """Remove the cells inside the selection."""
        area = self.selected_range()
        doomed = [
            (row, column)
            for row, column in self._cells
            if area.top_row <= row <= area.bottom_row
            and area.left_column <= column <= area.right_column
        ]
        if doomed:
            for position in doomed:
                del self._cells[position]
            self._something_changed()

    def select_current_row(self) -> None:
        row = self.current_row
        self.select_range(row, 0, row, COLUMN_COUNT - 1)

    def select_current_column(self) -> None:
        column = self.current_column
        self.select_range(0, column, ROW_COUNT - 1, column)

    def select_all(self) -> None:
        self.select_range(0, 0, ROW_COUNT - 1, COLUMN_COUNT - 1)

    def recalculate(self) -> None:
        for cell in self._cells.values():
            cell.set_dirty()

    def set_auto_recalculate(self, recalc: bool) -> None:
        self._auto_recalc = recalc
        if recalc:
            self.recalculate()

    def _positions_after(self) -> Iterator[Tuple[int, int]]:
        start_row, start_column = self.current_row, self.current_column
        for row in range(start_row, ROW_COUNT):
            first = start_column + 1 if row == start_row else 0
            for column in range(first, COLUMN_COUNT):
                yield row, column

    def _positions_before(self) -> Iterator[Tuple[int, int]]:
        start_row, start_column = self.current_row, self.current_column
        for row in range(start_row, -1, -1):
            last = start_column - 1 if row == start_row else COLUMN_COUNT - 1
            for column in range(last, -1, -1):
                yield row, column

    def _find(self, positions: Iterator[Tuple[int, int]], text: str,
              case_sensitive: bool) -> bool:
        for row, column in positions:
            if _contains(self.text(row, column), text, case_sensitive):
                self.clear_selection()
                self.set_current_cell(row, column)
                return True
        return False

    def find_next(self, text: str, case_sensitive: bool) -> bool:
        """Move to the next cell showing *text*; return whether one was found."""
        return self._find(self._positions_after(), text, case_sensitive)

    def find_previous(self, text: str, case_sensitive: bool) -> bool:
        """Move to the previous cell showing *text*; return whether one was found."""
        return self._find(self._positions_before(), text, case_sensitive)

    def _something_changed(self) -> None:
        if self._auto_recalc:
            self.recalculate()
        for listener in self.modified_listeners:
            listener()

    def cell(self, row: int, column: int) -> Optional[Cell]:
        return self._cells.get((row, column))

    def formula(self, row: int, column: int) -> str:
        cell = self.cell(row, column)
        return cell.formula if cell is not None else ""

    def set_formula(self, row: int, column: int, formula: str) -> None:
        self._check_position(row, column)
        cell = self._cells.get((row, column))
        if cell is None:
            cell = Cell(self.cell)
            self._cells[(row, column)] = cell
        cell.formula = formula
        self._something_changed()

    def text(self, row: int, column: int) -> str:
        cell = self.cell(row, column)
        return cell.display_text() if cell is not None else ""