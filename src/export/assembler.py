# src/export/assembler.py — v1
"""Export assembly: 14-column CSV/XLSX and the raw-scan CSV.

Rows keep input order and a header row is always written. CSV cells are
all text (the csv module quotes any value containing the delimiter);
in XLSX, integer country codes are numeric cells and everything else is
a text cell so IDs and DDMMYYYY dates keep their leading zeros.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Iterable, Literal

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from passportscan.core.errors import NoRecordsToExportError
from passportscan.core.models import EXPORT_COLUMNS, NormalizedRecord, RawScanResult

logger = logging.getLogger(__name__)

ExportKind = Literal["csv", "xlsx", "raw"]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Pasaportes"
TEXT_FORMAT = "@"

_FILENAME_PATTERNS: dict[str, str] = {
    "csv": "passport_data_{day}.csv",
    "xlsx": "passport_data_{day}.xlsx",
    "raw": "passport_raw_scans_{day}.csv",
}


def export_filename(kind: ExportKind, day: date | None = None) -> str:
    """Download filename with an ISO date stamp."""
    day = day or date.today()
    return _FILENAME_PATTERNS[kind].format(day=day.isoformat())


def media_type(kind: ExportKind) -> str:
    return XLSX_MEDIA_TYPE if kind == "xlsx" else CSV_MEDIA_TYPE


def _require(records: list) -> None:
    if not records:
        raise NoRecordsToExportError()


def records_to_csv(records: Iterable[NormalizedRecord]) -> str:
    """Serialize records as CSV text (header + one row per record).

    Raises:
        NoRecordsToExportError: If records is empty.
    """
    rows = list(records)
    _require(rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for record in rows:
        writer.writerow([str(value) for value in record.to_row()])
    logger.info("Assembled CSV export: %d rows", len(rows))
    return buffer.getvalue()


def records_to_xlsx(records: Iterable[NormalizedRecord]) -> bytes:
    """Serialize records as an XLSX workbook with typed cells.

    Raises:
        NoRecordsToExportError: If records is empty.
    """
    rows = list(records)
    _require(rows)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(list(EXPORT_COLUMNS))

    widths = [len(name) for name in EXPORT_COLUMNS]
    for row_index, record in enumerate(rows, start=2):
        for col_index, value in enumerate(record.to_row(), start=1):
            cell = sheet.cell(row=row_index, column=col_index, value=value)
            if not isinstance(value, int):
                cell.number_format = TEXT_FORMAT
            widths[col_index - 1] = max(widths[col_index - 1], len(str(value)))

    for col_index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(col_index)].width = min(width + 2, 50)
    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.info("Assembled XLSX export: %d rows", len(rows))
    return buffer.getvalue()


def raw_results_to_csv(results: Iterable[RawScanResult]) -> str:
    """CSV of raw OCR fields; columns are the union of keys, first-seen order.

    Raises:
        NoRecordsToExportError: If results is empty.
    """
    rows = list(results)
    _require(rows)

    fieldnames: list[str] = []
    for result in rows:
        for key in result.fields:
            if key not in fieldnames:
                fieldnames.append(key)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, restval="")
    writer.writeheader()
    for result in rows:
        writer.writerow(result.fields)
    logger.info("Assembled raw CSV export: %d rows, %d columns", len(rows), len(fieldnames))
    return buffer.getvalue()
