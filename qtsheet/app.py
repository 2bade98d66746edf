"""The spreadsheet application window: files, recent files, settings and commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from qtsheet.dialogs import FindDialog, SortDialog, parse_cell_reference
from qtsheet.spreadsheet import (
    COLUMN_COUNT,
    ROW_COUNT,
    Spreadsheet,
    SpreadsheetError,
)

APPLICATION_NAME = "Spreadsheet"
UNTITLED = "Untitled"
MAX_RECENT_FILES = 5
DEFAULT_SETTINGS_PATH = Path.home() / ".qtsheet.json"

AskToSave = Callable[[], Optional[bool]]
"""Asked before discarding changes: True saves, False discards, None cancels."""


def stripped_name(path) -> str:
    """Return the file name part of *path*."""
    return Path(path).name


class MainWindow:
    """The application state behind the main window."""

    def __init__(self, settings_path=None) -> None:
        self.settings_path = Path(settings_path or DEFAULT_SETTINGS_PATH)
        self.spreadsheet = Spreadsheet()
        self.current_file = ""
        self.recent_files: List[str] = []
        self.modified = False
        self.show_grid = True
        self.status_message = ""
        self.ask_to_save: Optional[AskToSave] = None
        self._find_dialog: Optional[FindDialog] = None
        self.spreadsheet.modified_listeners.append(self._spreadsheet_modified)
        self.read_settings()
        self._set_current_file("")

    @property
    def auto_recalculate(self) -> bool:
        return self.spreadsheet.auto_recalculate

    @auto_recalculate.setter
    def auto_recalculate(self, recalc: bool) -> None:
        self.spreadsheet.set_auto_recalculate(recalc)

    def _spreadsheet_modified(self) -> None:
        self.modified = True

    def title(self) -> str:
        """Return the window title; an asterisk marks unsaved changes."""
        shown = stripped_name(self.current_file) if self.current_file else UNTITLED
        marker = "*" if self.modified else ""
        return f"{shown}{marker} - {APPLICATION_NAME}"

    def _ok_to_continue(self) -> bool:
        if not self.modified or self.ask_to_save is None:
            return True
        answer = self.ask_to_save()
        if answer is None:
            return False
        if answer:
            self.save()
        return True

    def new_file(self) -> None:
        """Start an empty, untitled sheet unless the user cancels."""
        if self._ok_to_continue():
            self.spreadsheet.clear()
            self._set_current_file("")

    def load_file(self, path) -> None:
        """Load *path* into the sheet and make it the current file."""
        try:
            self.spreadsheet.read_file(path)
        except SpreadsheetError:
            self.status_message = "Loading canceled"
            raise
        self._set_current_file(str(path))
        self.status_message = "File loaded"

    def save_file(self, path) -> None:
        """Write the sheet to *path* and make it the current file."""
        try:
            self.spreadsheet.write_file(path)
        except SpreadsheetError:
            self.status_message = "Saving canceled"
            raise
        self._set_current_file(str(path))
        self.status_message = "File saved"

    def save(self) -> None:
        """Save to the current file."""
        if not self.current_file:
            raise SpreadsheetError("No file name has been chosen.")
        self.save_file(self.current_file)

    def close(self) -> bool:
        """Store the settings and report whether the window may close."""
        if not self._ok_to_continue():
            return False
        self.write_settings()
        return True

    def _set_current_file(self, path: str) -> None:
        self.current_file = path
        self.modified = False
        if path:
            self.recent_files = [p for p in self.recent_files if p != path]
            self.recent_files.insert(0, path)
            self._prune_recent_files()

    def _prune_recent_files(self) -> None:
        self.recent_files = [p for p in self.recent_files if Path(p).exists()]

    def recent_file_entries(self) -> List[Tuple[str, str]]:
        """Return ``(menu text, path)`` for the recent files that still exist."""
        self._prune_recent_files()
        return [
            (f"&{number} {stripped_name(path)}", path)
            for number, path in enumerate(self.recent_files[:MAX_RECENT_FILES], start=1)
        ]

    def go_to_cell(self, reference: str) -> None:
        """Make the cell at *reference*, such as ``B7``, the current cell."""
        row, column = parse_cell_reference(reference)
        self.spreadsheet.set_current_cell(row, column)

    def find_dialog(self) -> FindDialog:
        """Return the find dialog, created on first use and bound to the sheet."""
        if self._find_dialog is None:
            self._find_dialog = FindDialog(
                self.spreadsheet.find_next, self.spreadsheet.find_previous
            )
        return self._find_dialog

    def sort_dialog(self) -> SortDialog:
        """Return a sort dialog offering the columns of the current selection."""
        area = self.spreadsheet.selected_range()
        dialog = SortDialog()
        dialog.set_column_range(
            chr(ord("A") + area.left_column), chr(ord("A") + area.right_column)
        )
        return dialog

    def sort(self, dialog: SortDialog) -> None:
        """Sort the selection by the keys chosen in *dialog*."""
        self.spreadsheet.sort(dialog.compare())

    def status(self) -> Tuple[str, str]:
        """Return the current cell's location and formula."""
        return self.spreadsheet.current_location(), self.spreadsheet.current_formula()

    def read_settings(self) -> None:
        """Restore recent files and options; missing or broken settings use defaults."""
        try:
            data = json.loads(self.settings_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = {}
        if not isinstance(data, dict):
            data = {}
        recent = data.get("recentFiles", [])
        self.recent_files = [str(p) for p in recent] if isinstance(recent, list) else []
        self._prune_recent_files()
        self.show_grid = bool(data.get("showGrid", True))
        self.auto_recalculate = bool(data.get("autoRecalc", True))

    def write_settings(self) -> None:
        """Store recent files and options."""
        data = {
            "recentFiles": self.recent_files,
            "showGrid": self.show_grid,
            "autoRecalc": self.auto_recalculate,
        }
        self.settings_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def main(argv=None) -> int:
    """Open a sheet file and list its non-empty cells."""
    parser = argparse.ArgumentParser(prog="qtsheet", description=__doc__)
    parser.add_argument("file", nargs="?", help="spreadsheet file to open")
    parser.add_argument("--settings", help="settings file to use")
    args = parser.parse_args(argv)

    window = MainWindow(args.settings)
    if args.file:
        try:
            window.load_file(args.file)
        except SpreadsheetError as exc:
            print(f"{window.status_message}: {exc}", file=sys.stderr)
            return 1
    print(window.title())
    sheet = window.spreadsheet
    for row in range(ROW_COUNT):
        for column in range(COLUMN_COUNT):
            formula = sheet.formula(row, column)
            if formula:
                location = chr(ord("A") + column) + str(row + 1)
                print(f"{location}\t{formula}\t{sheet.text(row, column)}")
    window.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())