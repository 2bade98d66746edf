# qtsheet

qtsheet is a small spreadsheet engine written in pure Python. Its grid
has 999 rows and 26 columns, A to Z. Each cell holds a formula and
works out its value when asked:

- text that starts with `'` is taken as it stands, so `'42` is the
  text `42`;
- text that starts with `=` is an expression built from `+ - * /`,
  parentheses, unary minus, numbers and cell references such as `B7`.
  Spaces are ignored, and a reference to an empty cell counts as `0`;
- text that reads as a number becomes a number;
- anything else stays as text.

A formula that cannot be worked out has the value `None` and shows as
`####`. Division by zero, arithmetic on text, unbalanced parentheses
and a cell that refers to itself all give this result. Text aligns to
the left. Numbers and invalid values align to the right
(`Cell.alignment()` returns an `Alignment`).

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## Using the spreadsheet

```python
from qtsheet.spreadsheet import Spreadsheet, SpreadsheetCompare

sheet = Spreadsheet()
sheet.set_formula(0, 0, "2")
sheet.set_formula(0, 1, "=A1*3")

sheet.cell(0, 1).value()          # 6.0
sheet.cell(0, 1).display_text()   # "6"
sheet.text(0, 1)                  # "6"

sheet.set_current_cell(0, 1)
sheet.current_location()          # "B1"
sheet.current_formula()           # "=A1*3"
```

A position outside the grid raises `IndexError`.

### Selection and clipboard

You choose cells with `set_current_cell`, `select_range`,
`select_current_row`, `select_current_column` and `select_all`.
`clear_selection` empties the selection, and `selected_range()`
returns it as a `SelectionRange`. `cut`, `copy`, `paste` and `delete`
act on the selection. The clipboard is the sheet's own `clipboard`
attribute, a string that holds the rows joined with newlines and the
columns joined with tabs. A paste raises `SpreadsheetError` when the
selection is more than one cell and is not the same size as the
clipboard.

### Find and sort

`find_next(text, case_sensitive)` and `find_previous(...)` search the
shown text of each cell, starting from the current cell. When they find
a match they move to that cell and return `True`. Otherwise they return
`False`.

`sort(compare)` sorts the rows of the selection in a stable way.
`compare` is a `SpreadsheetCompare` with three key columns, counted
from the left of the selection, where `-1` turns a key off. It also
holds three ascending flags.

### Recalculation and listeners

When auto-recalculation is on, which is the default, every change marks
all cells for recalculation. Call `set_auto_recalculate(False)` to turn
this off, and then call `recalculate()` yourself when you need it.
Callables in `modified_listeners` run after every change. Callables in
`current_cell_listeners` run when the current cell moves.

### Files

`write_file(path)` saves the sheet in a compact binary format: a
big-endian magic number followed by (row, column, UTF-16 formula)
records for the cells that are not empty. `read_file(path)` loads it
again. It raises `SpreadsheetError` if the file cannot be read, is not
a spreadsheet file, or is cut short.

## Dialog logic

`qtsheet.dialogs` holds the logic of the find, go-to-cell and sort
dialogs, with no widgets:

- `is_cell_reference` checks a reference such as `C12`, and
  `parse_cell_reference` turns it into a zero-based `(row, column)`.
  An invalid reference raises `ValueError`;
- `GoToCellDialog` enables OK only for a valid reference, and
  `target()` returns its position;
- `FindDialog` enables Find only for text that is not empty.
  `find_clicked()` passes the text and the case setting to the forward
  or backward callback;
- `SortDialog` offers a range of column letters through
  `set_column_range`, and `compare()` builds a `SpreadsheetCompare`
  from the columns and orders chosen.

## The main window

`qtsheet.app.MainWindow` ties a sheet to a current file, a window title
(an asterisk marks unsaved changes), a list of recently opened files
that still exist, up to five of which are shown, and options for the
grid and auto-recalculation. The recent files and options are kept in a
JSON settings file, `~/.qtsheet.json` by default.

Its methods are:

- `new_file`, `load_file`, `save_file` and `save`;
- `go_to_cell`, `find_dialog`, `sort_dialog` and `sort`;
- `status` and `recent_file_entries`;
- `read_settings`, `write_settings` and `close`.

You can set `ask_to_save` to a callable that is asked before unsaved
changes are thrown away: it returns `True` to save, `False` to discard
or `None` to cancel. `stripped_name` gives the file name part of a
path.

The `qtsheet` command opens a sheet file if you give one. It prints the
window title and then, for each cell that is not empty, a line with the
location, the formula and the shown text, separated by tabs. It then
writes the settings file:

```
qtsheet [FILE] [--settings SETTINGS]
```

## What the package does not do

There is no graphical window, menu, toolbar or status bar. `MainWindow`
is the state and the commands behind such a window, and the `qtsheet`
command only lists a sheet's contents. The clipboard belongs to each
sheet and is not the system clipboard. There is no "save as" prompt:
`save` raises `SpreadsheetError` until a file name has been given
through `save_file` or `load_file`.

## Other modules

- `qtsheet.runtime`: run-time class records. Each class has a
  `RuntimeClass` record with its name, its size and the record of its
  base. `is_derived_from` walks the chain of base records, and
  `MyObject.is_kind_of` asks whether an object is of a given kind.
  `MyStudent` is derived from `MyObject`. The `qtsheet-runtime` command
  prints ` a student! ` for a `MyStudent` object.
- `qtsheet.concurrency`: helpers that apply a function to the items of
  a list on worker threads: `map_in_place`, `mapped`,
  `mapped_reduced`, `filter_in_place` and `filtered`. It also has
  threaded counters (`Counter`, `run_counters`) and a `Controller`. The
  `Controller` runs a `Worker` on its own thread, collects the results
  in `results`, passes them on to a callback, and is a context manager
  that stops the thread on exit.