# reports/services/export_service.py

"""
REPORT EXPORT SERVICE

Turns a report payload (the JSON returned by the report endpoints) into an
Excel workbook.

Layout:
- row 1: title
- row 2: generation timestamp
- from row 4: top-level scalars (date, totalAmount, ...) as key / value rows
- then one section per remaining key, in this order: summary, totals,
  byMethod, details, transactions, then anything else
  - list of objects -> header row + one row per object
  - object          -> key / value rows

No HTTP here; the view wraps the bytes in a download response.
"""

from __future__ import annotations

import io
import json
import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

logger = logging.getLogger("reports")

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SECTION_ORDER = ("summary", "totals", "byMethod", "details", "transactions")

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
SECTION_FONT = Font(bold=True, size=12)
NUMBER_FORMAT = "#,##0.00"

MAX_COLUMN_WIDTH = 50

# Excel sheet titles: max 31 chars, none of []:*?/\
_SHEET_TITLE_INVALID = re.compile(r"[\[\]:*?/\\]")


def humanize(key: str) -> str:
    """paymentMethodName -> Payment Method Name"""
    spaced = re.sub(r"(?<!^)([A-Z])", r" \1", key.replace("_", " "))
    return spaced[:1].upper() + spaced[1:]


def export_filename(report_type: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9_-]+", "-", report_type).strip("-") or "report"
    return f"{slug}-report.xlsx"


def _sheet_title(title: str) -> str:
    cleaned = _SHEET_TITLE_INVALID.sub(" ", title).strip()
    return (cleaned or "Report")[:31]


def _cell_value(value: Any):
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return value


def _write_value(ws, row: int, column: int, value: Any) -> None:
    cell = ws.cell(row=row, column=column, value=_cell_value(value))
    if isinstance(value, float):
        cell.number_format = NUMBER_FORMAT


def _write_section_title(ws, row: int, key: str) -> int:
    cell = ws.cell(row=row, column=1, value=humanize(key))
    cell.font = SECTION_FONT
    return row + 1


def _write_table(ws, row: int, items) -> int:
    headers = list(items[0].keys())
    for column, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=column, value=humanize(header))
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    row += 1

    for item in items:
        for column, header in enumerate(headers, 1):
            _write_value(ws, row, column, item.get(header))
        row += 1
    return row


def _write_pairs(ws, row: int, pairs: Dict[str, Any]) -> int:
    for key, value in pairs.items():
        ws.cell(row=row, column=1, value=humanize(key))
        _write_value(ws, row, 2, value)
        row += 1
    return row


def _ordered_keys(report: Dict[str, Any]):
    known = [key for key in SECTION_ORDER if key in report]
    return known + [key for key in report if key not in SECTION_ORDER]


def _autosize(ws) -> None:
    for column in ws.columns:
        width = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(width + 2, MAX_COLUMN_WIDTH)


def build_report_workbook(
    *,
    report_type: str,
    report: Dict[str, Any],
    title: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> bytes:
    title = title or f"{humanize(report_type.replace('-', ' ')).title()} Report"
    generated_at = generated_at or timezone.localtime()

    wb = Workbook()
    ws = wb.active
    ws.title = _sheet_title(title)

    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(bold=True, size=16)
    title_cell.alignment = Alignment(horizontal="left")
    ws.cell(row=2, column=1, value=f"Generated on: {generated_at:%Y-%m-%d %H:%M}").font = Font(
        italic=True, size=10
    )

    row = 4
    keys = _ordered_keys(report)

    # plain values (date, totalAmount, branchName, ...) go first as key / value rows
    scalars = {key: report[key] for key in keys if not isinstance(report[key], (list, dict))}
    if scalars:
        row = _write_pairs(ws, row, scalars) + 1

    for key in keys:
        value = report[key]

        if isinstance(value, list):
            rows = [item for item in value if isinstance(item, dict)]
            if not rows:
                continue
            row = _write_section_title(ws, row, key)
            row = _write_table(ws, row, rows) + 1
        elif isinstance(value, dict) and value:
            row = _write_section_title(ws, row, key)
            row = _write_pairs(ws, row, value) + 1

    _autosize(ws)

    output = io.BytesIO()
    wb.save(output)

    logger.info(
        "Report exported",
        extra={"report_type": report_type, "sections": len(report), "size_bytes": output.tell()},
    )
    return output.getvalue()
