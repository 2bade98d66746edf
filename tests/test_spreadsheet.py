import pytest

from qtsheet.spreadsheet import (
    COLUMN_COUNT,
    MAGIC_NUMBER,
    ROW_COUNT,
    SelectionRange,
    Spreadsheet,
    SpreadsheetCompare,
    SpreadsheetError,
)


@pytest.fixture
def sheet():
    return Spreadsheet()


def test_new_sheet_starts_at_first_cell(sheet):
    assert (sheet.current_row, sheet.current_column) == (0, 0)
    assert sheet.auto_recalculate is True
    assert sheet.current_formula() == ""


def test_current_location(sheet):
    sheet.set_current_cell(4, 2)
    assert sheet.current_location() == "C5"
    assert sheet.selected_range() == SelectionRange(4, 2, 4, 2)


def test_current_formula(sheet):
    sheet.set_formula(3, 1, "=A1")
    sheet.set_current_cell(3, 1)
    assert sheet.current_formula() == "=A1"


def test_formula_round_trip_and_missing_cells(sheet):
    sheet.set_formula(2, 3, "hello")
    assert sheet.formula(2, 3) == "hello"
    assert sheet.cell(2, 3).formula == "hello"
    assert sheet.cell(5, 5) is None
    assert sheet.formula(5, 5) == ""
    assert sheet.text(5, 5) == ""


def test_out_of_range_positions_raise(sheet):
    with pytest.raises(IndexError):
        sheet.set_formula(ROW_COUNT, 0, "x")
    with pytest.raises(IndexError):
        sheet.set_current_cell(0, COLUMN_COUNT)


def test_references_between_cells(sheet):
    sheet.set_formula(0, 0, "4")
    sheet.set_formula(0, 1, "=A1")
    assert sheet.text(0, 1) == sheet.text(0, 0)
    sheet.set_formula(0, 0, "9")
    assert sheet.text(0, 1) == sheet.text(0, 0)


def test_manual_recalculation(sheet):
    sheet.set_auto_recalculate(False)
    sheet.set_formula(0, 0, "1")
    sheet.set_formula(0, 1, "=A1")
    old = sheet.text(0, 1)
    sheet.set_formula(0, 0, "5")
    assert sheet.text(0, 1) == old
    sheet.recalculate()
    assert sheet.text(0, 1) == sheet.text(0, 0)


def test_listeners_are_notified(sheet):
    modified = []
    moved = []
    sheet.modified_listeners.append(lambda: modified.append(True))
    sheet.current_cell_listeners.append(lambda: moved.append(True))
    sheet.set_formula(1, 1, "x")
    sheet.set_current_cell(1, 1)
    assert len(modified) >= 1
    assert len(moved) == 1


def test_file_round_trip(sheet, tmp_path):
    sheet.set_formula(0, 0, "1")
    sheet.set_formula(2, 3, "=A1*2")
    sheet.set_formula(ROW_COUNT - 1, COLUMN_COUNT - 1, "'end")
    path = tmp_path / "sheet.sp"
    sheet.write_file(path)

    other = Spreadsheet()
    other.set_formula(5, 5, "junk")
    other.read_file(path)
    for row, column in [(0, 0), (2, 3), (ROW_COUNT - 1, COLUMN_COUNT - 1)]:
        assert other.formula(row, column) == sheet.formula(row, column)
    assert other.formula(5, 5) == ""
    assert other.text(2, 3) == sheet.text(2, 3)


def test_file_wire_format(sheet, tmp_path):
    sheet.set_formula(0, 0, "x")
    path = tmp_path / "one.sp"
    sheet.write_file(path)
    expected = MAGIC_NUMBER.to_bytes(4, "big") + b"\x00\x00\x00\x00\x00\x00\x00\x02\x00x"
    assert path.read_bytes() == expected


def test_read_rejects_wrong_magic(sheet, tmp_path):
    path = tmp_path / "bad.sp"
    path.write_bytes(b"\x00\x00\x00\x00")
    sheet.set_formula(0, 0, "keep")
    with pytest.raises(SpreadsheetError):
        sheet.read_file(path)
    assert sheet.formula(0, 0) == "keep"


def test_read_rejects_truncated_file(sheet, tmp_path):
    path = tmp_path / "short.sp"
    path.write_bytes(MAGIC_NUMBER.to_bytes(4, "big") + b"\x00\x01")
    with pytest.raises(SpreadsheetError):
        sheet.read_file(path)


def test_read_missing_file(sheet, tmp_path):
    with pytest.raises(SpreadsheetError):
        sheet.read_file(tmp_path / "absent.sp")


def test_compare_callable():
    ascending = SpreadsheetCompare(keys=(0, -1, -1), ascending=(True, True, True))
    descending = SpreadsheetCompare(keys=(0, -1, -1), ascending=(False, True, True))
    assert ascending(["a"], ["b"]) is True
    assert ascending(["b"], ["a"]) is False
    assert ascending(["a"], ["a"]) is False
    assert descending(["b"], ["a"]) is True


def test_compare_requires_three_keys():
    with pytest.raises(ValueError):
        SpreadsheetCompare(keys=(0,), ascending=(True,))


def _fill(sheet, rows):
    for row, values in enumerate(rows):
        for column, value in enumerate(values):
            sheet.set_formula(row, column, value)


def test_sort_ascending_keeps_rows_together(sheet):
    rows = [["c", "1"], ["a", "2"], ["b", "3"]]
    _fill(sheet, rows)
    sheet.select_range(0, 0, 2, 1)
    sheet.sort(SpreadsheetCompare(keys=(0, -1, -1), ascending=(True, True, True)))
    result = [[sheet.formula(r, c) for c in range(2)] for r in range(3)]
    assert [row[0] for row in result] == sorted(row[0] for row in rows)
    assert sorted(map(tuple, result)) == sorted(map(tuple, rows))
    assert sheet.selected_range().row_count == 0


def test_sort_descending(sheet):
    rows = [["c"], ["a"], ["b"]]
    _fill(sheet, rows)
    sheet.select_range(0, 0, 2, 0)
    sheet.sort(SpreadsheetCompare(keys=(0, -1, -1), ascending=(False, True, True)))
    result = [sheet.formula(r, 0) for r in range(3)]
    assert result == sorted((row[0] for row in rows), reverse=True)


def test_sort_is_stable_and_uses_secondary_key(sheet):
    rows = [["x", "2"], ["x", "1"], ["a", "9"]]
    _fill(sheet, rows)
    sheet.select_range(0, 0, 2, 1)
    sheet.sort(SpreadsheetCompare(keys=(0, -1, -1), ascending=(True, True, True)))
    assert [sheet.formula(r, 1) for r in range(3)] == ["9", "2", "1"]
    sheet.select_range(0, 0, 2, 1)
    sheet.sort(SpreadsheetCompare(keys=(0, 1, -1), ascending=(True, True, True)))
    assert [sheet.formula(r, 1) for r in range(3)] == ["9", "1", "2"]


def test_copy_and_paste(sheet):
    _fill(sheet, [["1", "2"], ["3", "=A1"]])
    sheet.select_range(0, 0, 1, 1)
    sheet.copy()
    assert sheet.clipboard == "1\t2\n3\t=A1"
    sheet.set_current_cell(5, 5)
    sheet.paste()
    assert [[sheet.formula(r, c) for c in (5, 6)] for r in (5, 6)] == [
        ["1", "2"],
        ["3", "=A1"],
    ]


def test_paste_size_mismatch(sheet):
    sheet.clipboard = "a\tb"
    sheet.select_range(0, 0, 2, 2)
    with pytest.raises(SpreadsheetError):
        sheet.paste()


def test_paste_is_clipped_at_sheet_edge(sheet):
    sheet.clipboard = "p\tq\nr\ts"
    sheet.set_current_cell(ROW_COUNT - 1, COLUMN_COUNT - 1)
    sheet.paste()
    assert sheet.formula(ROW_COUNT - 1, COLUMN_COUNT - 1) == "p"


def test_cut_copies_then_clears(sheet):
    sheet.set_formula(1, 1, "value")
    sheet.set_current_cell(1, 1)
    sheet.cut()
    assert sheet.clipboard == "value"
    assert sheet.formula(1, 1) == ""
    assert sheet.cell(1, 1) is None


def test_delete_removes_selected_cells_only(sheet):
    sheet.set_formula(0, 0, "a")
    sheet.set_formula(0, 1, "b")
    sheet.set_formula(3, 3, "c")
    sheet.select_range(0, 0, 0, 1)
    sheet.delete()
    assert sheet.cell(0, 0) is None
    assert sheet.cell(0, 1) is None
    assert sheet.formula(3, 3) == "c"


def test_find_next(sheet):
    sheet.set_formula(3, 4, "Needle")
    sheet.set_current_cell(0, 0)
    assert sheet.find_next("needle", True) is False
    assert (sheet.current_row, sheet.current_column) == (0, 0)
    assert sheet.find_next("needle", False) is True
    assert (sheet.current_row, sheet.current_column) == (3, 4)


def test_find_previous(sheet):
    sheet.set_formula(3, 4, "Needle")
    sheet.set_current_cell(10, 0)
    assert sheet.find_previous("Needle", True) is True
    assert (sheet.current_row, sheet.current_column) == (3, 4)
    assert sheet.find_previous("Needle", True) is False


def test_select_current_row_and_column(sheet):
    sheet.set_current_cell(4, 2)
    sheet.select_current_row()
    assert sheet.selected_range() == SelectionRange(4, 0, 4, COLUMN_COUNT - 1)
    sheet.select_current_column()
    assert sheet.selected_range() == SelectionRange(0, 2, ROW_COUNT - 1, 2)


def test_select_all_and_clear_selection(sheet):
    sheet.select_all()
    area = sheet.selected_range()
    assert (area.row_count, area.column_count) == (ROW_COUNT, COLUMN_COUNT)
    sheet.clear_selection()
    assert sheet.selected_range() == SelectionRange()
    assert sheet.selected_range().column_count == 0


def test_clear_resets_sheet(sheet):
    sheet.set_formula(7, 7, "x")
    sheet.set_current_cell(7, 7)
    sheet.clear()
    assert sheet.cell(7, 7) is None
    assert (sheet.current_row, sheet.current_column) == (0, 0)