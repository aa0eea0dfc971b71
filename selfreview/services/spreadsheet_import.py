"""Parse uploaded spreadsheets into row dictionaries plus per-sheet metadata."""

from __future__ import annotations

import csv
import io
import logging
import mimetypes
import struct
import zipfile
from datetime import date, datetime, time
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from selfreview.core.errors import ParseError, ValidationError
from selfreview.schemas import FileImportResult, FileImportSummary, SheetInfo

logger = logging.getLogger(__name__)

WORKBOOK_EXTENSIONS = frozenset({".xlsx", ".xlsm"})
LEGACY_WORKBOOK_EXTENSIONS = frozenset({".xls"})
CSV_EXTENSIONS = frozenset({".csv"})
SUPPORTED_EXTENSIONS = WORKBOOK_EXTENSIONS | LEGACY_WORKBOOK_EXTENSIONS | CSV_EXTENSIONS

Row = Tuple[Any, ...]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _trim(row: Iterable[Any]) -> Row:
    values = list(row)
    while values and _is_blank(values[-1]):
        values.pop()
    return tuple(values)


def _cell_value(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _legacy_cell_value(cell: xlrd.sheet.Cell, datemode: int) -> Any:
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    # .xls stores every number as a float.
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        return int(cell.value)
    return cell.value


def _non_blank_rows(rows: Iterable[Iterable[Any]]) -> List[Row]:
    trimmed = (_trim(row) for row in rows)
    return [row for row in trimmed if row]


def _headers(first_row: Sequence[Any]) -> List[str]:
    headers = []
    for index, value in enumerate(first_row, start=1):
        headers.append(f"column_{index}" if _is_blank(value) else str(value).strip())
    return headers


class SpreadsheetImporter:
    """Stateless parser for ``.xlsx``/``.xlsm``/``.xls`` workbooks and ``.csv`` files."""

    def parse(
        self,
        file_name: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> FileImportResult:
        extension = PurePath(file_name).suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise ValidationError(
                f"Unsupported file type '{extension or file_name}'; upload an Excel or CSV file"
            )

        if extension in CSV_EXTENSIONS:
            sheets = {"Sheet1": self._read_csv(content)}
        elif extension in LEGACY_WORKBOOK_EXTENSIONS:
            sheets = self._read_legacy_workbook(content)
        else:
            sheets = self._read_workbook(content)

        first_name = next(iter(sheets), None)
        first_rows = sheets.get(first_name, []) if first_name else []
        if not first_rows:
            raise ParseError(f"{file_name} contains no data in its first sheet")

        headers = _headers(first_rows[0])
        main_data = [
            {
                header: _cell_value(row[index]) if index < len(row) else None
                for index, header in enumerate(headers)
            }
            for row in first_rows[1:]
        ]
        sheet_infos = [
            SheetInfo(
                name=name,
                row_count=len(rows),
                column_count=len(rows[0]) if rows else 0,
            )
            for name, rows in sheets.items()
        ]
        logger.info(
            "Parsed %s: %d rows across %d sheets", file_name, len(main_data), len(sheet_infos)
        )
        return FileImportResult(
            file_name=file_name,
            file_type=content_type or mimetypes.guess_type(file_name)[0] or "",
            sheets=sheet_infos,
            main_data=main_data,
            headers=headers,
            summary=FileImportSummary(
                total_rows=len(main_data), total_sheets=len(sheet_infos)
            ),
        )

    @staticmethod
    def _read_workbook(content: bytes) -> Dict[str, List[Row]]:
        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
            raise ParseError("The uploaded workbook could not be read") from exc

        try:
            return {
                worksheet.title: _non_blank_rows(worksheet.iter_rows(values_only=True))
                for worksheet in workbook.worksheets
            }
        finally:
            workbook.close()

    @staticmethod
    def _read_legacy_workbook(content: bytes) -> Dict[str, List[Row]]:
        try:
            book = xlrd.open_workbook(file_contents=content, on_demand=True)
        except (xlrd.XLRDError, CompDocError, struct.error, EOFError) as exc:
            raise ParseError("The uploaded workbook could not be read") from exc

        try:
            return {
                sheet.name: _non_blank_rows(
                    [_legacy_cell_value(cell, book.datemode) for cell in sheet.row(index)]
                    for index in range(sheet.nrows)
                )
                for sheet in book.sheets()
            }
        finally:
            book.release_resources()

    @staticmethod
    def _read_csv(content: bytes) -> List[Row]:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError("CSV files must be UTF-8 encoded") from exc
        try:
            return _non_blank_rows(csv.reader(io.StringIO(text)))
        except csv.Error as exc:
            raise ParseError(f"Malformed CSV: {exc}") from exc


__all__ = ["SUPPORTED_EXTENSIONS", "SpreadsheetImporter"]
