# Overview: Spreadsheet (xlsx) rendering of report rows with openpyxl.

from __future__ import annotations

from io import BytesIO
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

_THIN = Side(style="thin")
_HEADER_FONT = Font(bold=True)
_TITLE_FONT = Font(bold=True, size=22)
_TOTAL_FILL = PatternFill(fill_type="solid", fgColor="FFFDE68A")
_BALANCE_FILL = PatternFill(fill_type="solid", fgColor="FFDCFCE7")

PERIOD_COLUMNS = ("DATE", "MATERIAL", "QTY", "RATE", "AMOUNT", "PAID", "BALANCE")
PERIOD_WIDTHS = (14, 20, 8, 10, 14, 14, 16)


def _to_bytes(wb: Workbook) -> bytes:
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def table_workbook(
    rows: Iterable[dict],
    columns: Sequence[tuple[str, str]],
    *,
    title: str | None = None,
    sheet_name: str = "Ledger",
) -> bytes:
    """
    Flat table export.

    columns is a sequence of (label, key) pairs; missing or None values are
    written as empty cells.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    row_idx = 1
    if title:
        ws.cell(row=1, column=1, value=title).font = _TITLE_FONT
        ws.cell(row=1, column=1).alignment = Alignment(horizontal="center")
        if len(columns) > 1:
            ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(columns))
        row_idx = 3

    for col_idx, (label, _) in enumerate(columns, start=1):
        cell = ws.cell(row=row_idx, column=col_idx, value=label)
        cell.font = _HEADER_FONT
        cell.alignment = Alignment(horizontal="center")
        cell.border = Border(bottom=_THIN)
        ws.column_dimensions[get_column_letter(col_idx)].width = 18

    for row in rows:
        row_idx += 1
        for col_idx, (_, key) in enumerate(columns, start=1):
            value = row.get(key)
            ws.cell(row=row_idx, column=col_idx, value="" if value is None else value)

    return _to_bytes(wb)


def period_workbook(report: dict) -> bytes:
    """Owner blocks of dated item rows, each day closed by a TOTAL row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Weekly Ledger"

    for col_idx, width in enumerate(PERIOD_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    row_idx = 1
    for owner in report.get("owners", []):
        ws.cell(row=row_idx, column=1, value=owner.get("owner_name")).font = _TITLE_FONT
        ws.merge_cells(start_row=row_idx, start_column=1, end_row=row_idx, end_column=len(PERIOD_COLUMNS))
        row_idx += 2

        for col_idx, label in enumerate(PERIOD_COLUMNS, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=label)
            cell.font = _HEADER_FONT
            cell.border = Border(top=_THIN, bottom=_THIN)
        row_idx += 1

        for day in owner.get("entries", []):
            for idx, item in enumerate(day.get("items", [])):
                values = (
                    day["date"] if idx == 0 else "",
                    item.get("material"),
                    item.get("qty"),
                    item.get("rate"),
                    item.get("total"),
                    day.get("paid") if idx == 0 and day.get("paid") else "",
                    "",
                )
                for col_idx, value in enumerate(values, start=1):
                    ws.cell(row=row_idx, column=col_idx, value="" if value is None else value)
                row_idx += 1

            totals = ("", "TOTAL", "", "", day.get("day_total"), day.get("paid") or "", day.get("balance"))
            for col_idx, value in enumerate(totals, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.font = _HEADER_FONT
                cell.fill = _BALANCE_FILL if col_idx == len(totals) else _TOTAL_FILL
            row_idx += 1

        row_idx += 1

    return _to_bytes(wb)
