# Overview: Printable bill rendering (reportlab); runs after the bill commits and may fail on its own.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from agency.time_utils import business_tz

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 50
RIGHT = 500
COL_MATERIAL = 50
COL_QTY = 250
COL_RATE = 350
COL_TOTAL = 450
ROW_HEIGHT = 20

# Units counted in pieces print the bare quantity instead of a mattam label
_COUNTABLE_HINTS = ("BRICKS", "STONE", "CEMENT")


@dataclass(frozen=True)
class DocumentOutcome:
    """
    Result of the post-commit document step.

    status: "generated", "failed" or "skipped". A failed outcome never affects
    the already-committed bill.
    """
    status: str
    filename: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "generated"

    def to_dict(self) -> dict:
        return {"status": self.status, "filename": self.filename, "error": self.error}


def bill_pdf_filename(bill_id: int, daily_bill_no: int) -> str:
    return f"bill_{bill_id}_{daily_bill_no}.pdf"


def _round_qty(quantity) -> str:
    try:
        return str(int(Decimal(str(quantity or 0)).to_integral_value()))
    except ArithmeticError:
        return "0"


def mattam_display(item: dict) -> str:
    """Text for the 'Mattam/Qty' column of a printed bill line."""
    name = (item.get("material_name") or "").upper()
    unit = (item.get("unit") or "").upper()

    if unit == "NO" or any(hint in name for hint in _COUNTABLE_HINTS):
        return _round_qty(item.get("quantity"))

    mattam = item.get("mattam")
    mattam_str = str(mattam).strip() if mattam is not None else ""

    if item.get("grill_mattam"):
        return f"Grill Mattam + {mattam_str}" if mattam_str else "Grill Mattam"

    if item.get("mattam_checked"):
        return f"Mattam + {mattam_str}" if mattam_str else "Mattam"

    if mattam_str == "":
        return "Mattam"

    try:
        mattam_num = Decimal(mattam_str)
    except ArithmeticError:
        return mattam_str
    if not mattam_num.is_finite():
        return mattam_str
    if mattam_num == 0:
        return _round_qty(item.get("quantity"))
    return f"Mattam + {int(mattam_num.to_integral_value())}"


def _money(value) -> str:
    return f"Rs. {Decimal(str(value or 0)):,.2f}"


def _local_date(ts: datetime | None, tz_name: str | None) -> str:
    if ts is None:
        return ""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(business_tz(tz_name)).strftime("%d/%m/%Y")


def render_bill_pdf(bill_data: dict, pdf_dir: str, *, tz_name: str | None = None) -> str:
    """
    Draw a single-page bill and return the written file path.

    bill_data carries the fully resolved bill: bill_id, daily_bill_no,
    bill_timestamp, owner_name, vehicle_number, items, total_amount,
    include_pass and pass_amount.
    """
    os.makedirs(pdf_dir, exist_ok=True)
    filename = bill_pdf_filename(bill_data["bill_id"], bill_data["daily_bill_no"])
    path = os.path.join(pdf_dir, filename)

    c = canvas.Canvas(path, pagesize=A4)
    top = PAGE_HEIGHT - 50

    c.setFont("Helvetica-Bold", 20)
    c.drawCentredString(PAGE_WIDTH / 2, top, "BILL")

    c.setFont("Helvetica", 10)
    c.drawString(LEFT, top - 40, f"Bill No: {bill_data['daily_bill_no']}")
    c.drawString(LEFT, top - 55, f"Date: {_local_date(bill_data.get('bill_timestamp'), tz_name)}")

    c.setFont("Helvetica-Bold", 11)
    c.drawString(LEFT, top - 85, "Customer Details:")
    c.setFont("Helvetica", 10)
    c.drawString(LEFT, top - 100, f"Name: {bill_data.get('owner_name') or ''}")
    c.drawString(LEFT, top - 115, f"Vehicle: {bill_data.get('vehicle_number') or ''}")

    y = top - 150
    c.setFont("Helvetica-Bold", 9)
    c.drawString(COL_MATERIAL, y, "Material")
    c.drawString(COL_QTY, y, "Mattam/Qty")
    c.drawString(COL_RATE, y, "Rate")
    c.drawString(COL_TOTAL, y, "Total")
    c.line(LEFT, y - 5, RIGHT, y - 5)

    y -= ROW_HEIGHT
    c.setFont("Helvetica", 9)
    for item in bill_data.get("items") or []:
        c.drawString(COL_MATERIAL, y, (item.get("material_name") or "")[:20])
        c.drawString(COL_QTY, y, mattam_display(item))
        c.drawString(COL_RATE, y, _money(item.get("rate_at_sale")))
        c.drawString(COL_TOTAL, y, _money(item.get("total_cost")))
        y -= ROW_HEIGHT

    c.line(LEFT, y + 10, RIGHT, y + 10)
    y -= 5

    if bill_data.get("include_pass"):
        c.drawString(COL_MATERIAL, y, "Pass Charge")
        c.drawString(COL_TOTAL, y, _money(bill_data.get("pass_amount")))
        y -= ROW_HEIGHT

    c.setFont("Helvetica-Bold", 11)
    c.drawString(LEFT, y - 10, f"Total Amount: {_money(bill_data.get('total_amount'))}")

    c.showPage()
    c.save()
    return path


def generate_bill_document(bill_data: dict, pdf_dir: str | None, *, tz_name: str | None = None) -> DocumentOutcome:
    """
    Best-effort wrapper around render_bill_pdf.

    Any rendering or filesystem error is logged and returned as a failed
    outcome instead of being raised.
    """
    if not pdf_dir:
        return DocumentOutcome(status="skipped")
    try:
        path = render_bill_pdf(bill_data, pdf_dir, tz_name=tz_name)
    except Exception as exc:
        logger.exception("Bill PDF generation failed for bill %s", bill_data.get("bill_id"))
        return DocumentOutcome(status="failed", error=str(exc))
    return DocumentOutcome(status="generated", filename=os.path.basename(path))
