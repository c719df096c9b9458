"""
Bill Service - atomic bill creation and bill reads

A bill is one request's worth of material sales for an owner/vehicle:
header + transaction lines (+ optional pass surcharge), written as a single
unit of work. The printable PDF is produced only after commit and can fail
without touching the saved bill.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from ..models import Bill, Material, Owner, OwnerPass, Transaction
from ..validation import (
    QUANTITY_PLACES,
    NotFoundError,
    TransactionAbortError,
    ValidationError,
    check_max_length,
    check_places,
    to_decimal,
    to_flag,
    to_money,
)
from agency.time_utils import utcnow
from .document_service import DocumentOutcome, bill_pdf_filename, generate_bill_document
from .sequence_service import next_daily_bill_no
from .vehicle_service import VEHICLE_NUMBER_MAX_LENGTH, normalize_vehicle_number, touch_vehicle

logger = logging.getLogger(__name__)

DEFAULT_PASS_AMOUNT = Decimal("200")
BILL_LIST_LIMIT = 200
MATTAM_MAX_LENGTH = 64


@dataclass(frozen=True)
class BillItemInput:
    material_id: int
    quantity: Decimal
    mattam: str | None = None
    grill_mattam: bool = False
    mattam_checked: bool = False


@dataclass
class BillCreationResult:
    bill: Bill
    items: list[Transaction]
    pass_row: OwnerPass | None
    document: DocumentOutcome = field(default_factory=lambda: DocumentOutcome(status="skipped"))

    def to_dict(self) -> dict:
        return {
            "bill": self.bill.to_dict(),
            "items": [t.to_dict() for t in self.items],
            "pass": self.pass_row.to_dict() if self.pass_row else None,
            "document": self.document.to_dict(),
        }


def _parse_items(items) -> list[BillItemInput]:
    if not isinstance(items, list) or not items:
        raise ValidationError("owner_id, vehicle_number and at least one item are required")

    parsed = []
    for idx, raw in enumerate(items, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"Item {idx} must be an object")

        material_id = raw.get("material_id")
        if isinstance(material_id, bool) or material_id in (None, ""):
            raise ValidationError(f"Item {idx}: material_id is required")
        try:
            material_id = int(material_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Item {idx}: material_id must be an integer")

        quantity = to_decimal(raw.get("quantity"), f"Item {idx}: quantity")
        check_places(quantity, QUANTITY_PLACES, f"Item {idx}: quantity")

        mattam = raw.get("mattam")
        if mattam is not None:
            mattam = str(mattam).strip() or None
            check_max_length(mattam, MATTAM_MAX_LENGTH, f"Item {idx}: mattam")
        parsed.append(
            BillItemInput(
                material_id=material_id,
                quantity=quantity,
                mattam=mattam,
                grill_mattam=to_flag(raw.get("grill_mattam"), f"Item {idx}: grill_mattam"),
                mattam_checked=to_flag(raw.get("mattam_checked"), f"Item {idx}: mattam_checked"),
            )
        )
    return parsed


def _price_lines(session, items: list[BillItemInput]) -> tuple[list[tuple[BillItemInput, Decimal, Decimal]], Decimal]:
    """Lock in current rates (one query) and compute line totals."""
    material_ids = {it.material_id for it in items}
    rate_map = {
        m.material_id: m.rate_per_unit
        for m in session.query(Material).filter(Material.material_id.in_(material_ids)).all()
    }

    lines = []
    bill_total = Decimal("0")
    for idx, item in enumerate(items, start=1):
        rate = rate_map.get(item.material_id)
        if rate is None:
            raise ValidationError(f"Item {idx}: invalid material or quantity")
        if item.quantity <= 0:
            raise ValidationError(f"Item {idx}: invalid material or quantity")
        line_total = to_money(Decimal(rate) * item.quantity)
        bill_total += line_total
        lines.append((item, Decimal(rate), line_total))
    return lines, bill_total


def create_bill(
    session,
    *,
    owner_id,
    vehicle_number,
    items,
    include_pass: bool = False,
    pass_amount: Decimal = DEFAULT_PASS_AMOUNT,
    tz_name: str | None = None,
    pdf_dir: str | None = None,
) -> BillCreationResult:
    """
    Create a bill with its transaction lines, optional pass and vehicle upsert.

    All writes share one timestamp and one transaction. ValidationError and
    NotFoundError leave nothing behind; storage failures are rolled back and
    surfaced as TransactionAbortError.
    """
    if not owner_id or not vehicle_number or not isinstance(items, list) or not items:
        raise ValidationError("owner_id, vehicle_number and at least one item are required")

    try:
        owner_id = int(owner_id)
    except (TypeError, ValueError):
        raise ValidationError("owner_id must be an integer")

    normalized_vehicle = normalize_vehicle_number(vehicle_number)
    if not normalized_vehicle:
        raise ValidationError("vehicle_number is required")
    check_max_length(normalized_vehicle, VEHICLE_NUMBER_MAX_LENGTH, "vehicle_number")

    parsed_items = _parse_items(items)
    pass_amount = to_money(pass_amount)

    try:
        owner = session.get(Owner, owner_id)
        if owner is None:
            raise NotFoundError("Owner not found")

        lines, bill_total = _price_lines(session, parsed_items)
        if include_pass:
            bill_total += pass_amount

        now = utcnow()
        daily_no = next_daily_bill_no(session, at=now, tz_name=tz_name)

        bill = Bill(
            owner_id=owner.owner_id,
            vehicle_number=normalized_vehicle,
            total_amount=bill_total,
            daily_bill_no=daily_no,
            include_pass=bool(include_pass),
            bill_timestamp=now,
        )
        session.add(bill)
        session.flush()

        inserted = []
        for item, rate, line_total in lines:
            tx = Transaction(
                owner_id=owner.owner_id,
                material_id=item.material_id,
                vehicle_number=normalized_vehicle,
                quantity=item.quantity,
                rate_at_sale=rate,
                total_cost=line_total,
                bill_id=bill.bill_id,
                mattam=item.mattam,
                grill_mattam=item.grill_mattam,
                mattam_checked=item.mattam_checked,
                transaction_timestamp=now,
            )
            session.add(tx)
            inserted.append(tx)

        pass_row = None
        if include_pass:
            pass_row = OwnerPass(
                owner_id=owner.owner_id,
                vehicle_number=normalized_vehicle,
                pass_amount=pass_amount,
                bill_id=bill.bill_id,
                pass_date=now,
            )
            session.add(pass_row)

        session.flush()
        touch_vehicle(session, owner_id=owner.owner_id, vehicle_number=normalized_vehicle, used_at=now)
        session.commit()
    except (ValidationError, NotFoundError):
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        raise TransactionAbortError("Failed to create bill") from exc

    logger.info(
        "Bill %s (daily #%s) created for owner %s: %s",
        bill.bill_id, bill.daily_bill_no, bill.owner_id, bill.total_amount,
    )

    result = BillCreationResult(bill=bill, items=inserted, pass_row=pass_row)
    result.document = generate_bill_document(
        build_bill_document_data(session, bill),
        pdf_dir,
        tz_name=tz_name,
    )
    return result


def _bill_lines(session, bill_id: int) -> list[tuple[Transaction, Material]]:
    return (
        session.query(Transaction, Material)
        .join(Material, Material.material_id == Transaction.material_id)
        .filter(Transaction.bill_id == bill_id)
        .order_by(Transaction.transaction_id.asc())
        .all()
    )


def build_bill_document_data(session, bill: Bill) -> dict:
    """Fully resolved bill (owner name, material names/units) for rendering."""
    owner = session.get(Owner, bill.owner_id)
    rows = _bill_lines(session, bill.bill_id)
    pass_row = session.query(OwnerPass).filter_by(bill_id=bill.bill_id).first()
    return {
        "bill_id": bill.bill_id,
        "daily_bill_no": bill.daily_bill_no,
        "bill_timestamp": bill.bill_timestamp,
        "owner_name": owner.name if owner else None,
        "vehicle_number": bill.vehicle_number,
        "items": [
            {
                "material_name": material.name,
                "unit": material.unit,
                "quantity": tx.quantity,
                "rate_at_sale": tx.rate_at_sale,
                "total_cost": tx.total_cost,
                "mattam": tx.mattam,
                "grill_mattam": tx.grill_mattam,
                "mattam_checked": tx.mattam_checked,
            }
            for tx, material in rows
        ],
        "total_amount": bill.total_amount,
        "include_pass": pass_row is not None,
        "pass_amount": pass_row.pass_amount if pass_row else None,
    }


def list_bills(session, *, owner_id: int | None = None, limit: int = BILL_LIST_LIMIT) -> list[dict]:
    query = session.query(Bill, Owner.name).join(Owner, Owner.owner_id == Bill.owner_id)
    if owner_id is not None:
        query = query.filter(Bill.owner_id == owner_id)
    rows = query.order_by(Bill.bill_timestamp.desc(), Bill.bill_id.desc()).limit(limit).all()

    out = []
    for bill, owner_name in rows:
        data = bill.to_dict()
        data["owner_name"] = owner_name
        out.append(data)
    return out


def get_bill(session, bill_id: int) -> Bill:
    bill = session.get(Bill, bill_id)
    if bill is None:
        raise NotFoundError("Bill not found")
    return bill


def get_bill_details(session, bill_id: int) -> dict:
    """Bill header + owner name + items joined with material details + pass."""
    bill = get_bill(session, bill_id)
    owner = session.get(Owner, bill.owner_id)
    pass_row = session.query(OwnerPass).filter_by(bill_id=bill.bill_id).first()

    items = []
    for tx, material in _bill_lines(session, bill.bill_id):
        data = tx.to_dict()
        data["material_name"] = material.name
        data["unit"] = material.unit
        items.append(data)

    bill_data = bill.to_dict()
    bill_data["owner_name"] = owner.name if owner else None
    return {
        "bill": bill_data,
        "items": items,
        "pass": pass_row.to_dict() if pass_row else None,
    }


def bill_pdf_path(bill: Bill, pdf_dir: str) -> str:
    return os.path.join(pdf_dir, bill_pdf_filename(bill.bill_id, bill.daily_bill_no))


def recompute_bill_total(session, bill_id: int) -> None:
    """Re-derive total_amount from current lines + pass (used after corrections)."""
    bill = session.get(Bill, bill_id)
    if bill is None:
        return
    lines = session.query(Transaction.total_cost).filter(Transaction.bill_id == bill_id).all()
    passes = session.query(OwnerPass.pass_amount).filter(OwnerPass.bill_id == bill_id).all()
    bill.total_amount = sum((Decimal(v) for (v,) in lines), Decimal("0")) + sum(
        (Decimal(v) for (v,) in passes), Decimal("0")
    )
