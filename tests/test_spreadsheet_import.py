try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import io
from datetime import datetime

import pytest
import xlrd
from openpyxl import Workbook
from xlrd.sheet import Cell

from selfreview.core.errors import ParseError, ValidationError
from selfreview.services.spreadsheet_import import SpreadsheetImporter


def _workbook_bytes() -> bytes:
    workbook = Workbook()
    tasks = workbook.active
    tasks.title = "Tasks"
    tasks.append(["Task", "Hours", None, "Finished"])
    tasks.append(["Write tests", 3, "extra", datetime(2025, 1, 2, 9, 30)])
    tasks.append([None, None, None, None])
    tasks.append(["Review", 1.5])
    notes = workbook.create_sheet("Notes")
    notes.append(["Note"])
    notes.append(["Busy week"])
    notes.append(["Short week"])
    workbook.create_sheet("Empty")

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_parse_xlsx_first_sheet_and_metadata():
    result = SpreadsheetImporter().parse("tasks.xlsx", _workbook_bytes())

    assert result.file_name == "tasks.xlsx"
    assert result.headers == ["Task", "Hours", "column_3", "Finished"]
    assert result.main_data == [
        {"Task": "Write tests", "Hours": 3, "column_3": "extra", "Finished": "2025-01-02T09:30:00"},
        {"Task": "Review", "Hours": 1.5, "column_3": None, "Finished": None},
    ]
    assert result.summary.total_rows == 2
    assert result.summary.total_sheets == 3
    assert [(sheet.name, sheet.row_count, sheet.column_count) for sheet in result.sheets] == [
        ("Tasks", 3, 4),
        ("Notes", 3, 1),
        ("Empty", 0, 0),
    ]


def test_parse_csv_drops_excess_columns():
    content = "Task,Status\nWrite docs,Done,unexpected\nPlan,\n\n".encode("utf-8-sig")
    result = SpreadsheetImporter().parse("tasks.csv", content, "text/csv")

    assert result.file_type == "text/csv"
    assert result.headers == ["Task", "Status"]
    assert result.main_data == [
        {"Task": "Write docs", "Status": "Done"},
        {"Task": "Plan", "Status": None},
    ]
    assert [sheet.name for sheet in result.sheets] == ["Sheet1"]


def test_header_only_file_has_no_rows():
    result = SpreadsheetImporter().parse("headers.csv", b"A,B\n")
    assert result.headers == ["A", "B"]
    assert result.main_data == []
    assert result.summary.total_rows == 0


def test_unsupported_extension():
    with pytest.raises(ValidationError):
        SpreadsheetImporter().parse("notes.txt", b"hello")


def test_empty_file_is_parse_error():
    with pytest.raises(ParseError):
        SpreadsheetImporter().parse("empty.csv", b"")


def test_corrupt_workbook_is_parse_error():
    with pytest.raises(ParseError):
        SpreadsheetImporter().parse("broken.xlsx", b"not a zip archive")


class FakeLegacySheet:
    def __init__(self, name: str, rows: list[list[Cell]]) -> None:
        self.name = name
        self.nrows = len(rows)
        self._rows = rows

    def row(self, index: int) -> list[Cell]:
        return self._rows[index]


class FakeLegacyBook:
    datemode = 0

    def __init__(self, *sheets: FakeLegacySheet) -> None:
        self._sheets = list(sheets)
        self.released = False

    def sheets(self) -> list[FakeLegacySheet]:
        return self._sheets

    def release_resources(self) -> None:
        self.released = True


def test_parse_legacy_xls(monkeypatch):
    text, number = xlrd.XL_CELL_TEXT, xlrd.XL_CELL_NUMBER
    book = FakeLegacyBook(
        FakeLegacySheet(
            "Tasks",
            [
                [Cell(text, "Task"), Cell(text, "Hours"), Cell(text, "Finished")],
                [Cell(text, "Write tests"), Cell(number, 3.0), Cell(xlrd.XL_CELL_DATE, 45659.5)],
                [Cell(xlrd.XL_CELL_EMPTY, ""), Cell(xlrd.XL_CELL_BLANK, "")],
                [Cell(text, "Review"), Cell(number, 1.5)],
            ],
        ),
        FakeLegacySheet("Empty", []),
    )
    opened = []

    def fake_open_workbook(*, file_contents, on_demand):
        opened.append(file_contents)
        return book

    monkeypatch.setattr(xlrd, "open_workbook", fake_open_workbook)

    result = SpreadsheetImporter().parse("legacy.xls", b"\xd0\xcf\x11\xe0", "application/vnd.ms-excel")

    assert opened == [b"\xd0\xcf\x11\xe0"]
    assert book.released is True
    assert result.file_type == "application/vnd.ms-excel"
    assert result.headers == ["Task", "Hours", "Finished"]
    assert result.main_data == [
        {"Task": "Write tests", "Hours": 3, "Finished": "2025-01-02T12:00:00"},
        {"Task": "Review", "Hours": 1.5, "Finished": None},
    ]
    assert [(sheet.name, sheet.row_count) for sheet in result.sheets] == [("Tasks", 3), ("Empty", 0)]


def test_corrupt_xls_is_parse_error():
    with pytest.raises(ParseError):
        SpreadsheetImporter().parse("broken.xls", b"definitely not a workbook")
