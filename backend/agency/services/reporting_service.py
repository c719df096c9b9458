# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func

from ..models import Owner, OwnerPass, OwnerPayment, Transaction
from ..validation import ValidationError, as_number
from agency.time_utils import (
    business_range_bounds,
    business_today,
    parse_iso_date,
    to_business_date,
    to_utc_z,
)
from .ledger_service import CREDIT, collect_events, order_events, running_balance

SORT_BY_NAME = "name"
SORT_BY_ACTIVITY = "activity"

_ZERO = Decimal("0")


def resolve_range(
    date_from: str | None,
    date_to: str | None,
    *,
    tz_name: str | None = None,
    require_both: bool = False,
) -> tuple[date, date]:
    """
    Inclusive business-date range.

    With require_both=False an omitted end is filled from the other one and
    both omitted means today (business timezone).
    """
    try:
        start = parse_iso_date(date_from)
        end = parse_iso_date(date_to)
    except ValueError:
        raise ValidationError("from and to must be YYYY-MM-DD dates")

    if require_both:
        if start is None or end is None:
            raise ValidationError("from and to dates are required")
    elif start is None and end is None:
        start = end = business_today(tz_name)
    elif start is None:
        start = end
    elif end is None:
        end = start

    if start > end:
        raise ValidationError("from must be on or before to")
    return start, end


def _credit_totals(session, start: datetime, end: datetime) -> dict[int, tuple[Decimal, datetime | None]]:
    tx_rows = (
        session.query(
            Transaction.owner_id,
            func.coalesce(func.sum(Transaction.total_cost), 0),
            func.max(Transaction.transaction_timestamp),
        )
        .filter(Transaction.transaction_timestamp >= start, Transaction.transaction_timestamp < end)
        .group_by(Transaction.owner_id)
        .all()
    )
    pass_rows = (
        session.query(
            OwnerPass.owner_id,
            func.coalesce(func.sum(OwnerPass.pass_amount), 0),
            func.max(OwnerPass.pass_date),
        )
        .filter(OwnerPass.pass_date >= start, OwnerPass.pass_date < end)
        .group_by(OwnerPass.owner_id)
        .all()
    )

    combined: dict[int, tuple[Decimal, datetime | None]] = {}
    for owner_id, total, last in list(tx_rows) + list(pass_rows):
        prev_total, prev_last = combined.get(owner_id, (_ZERO, None))
        combined[owner_id] = (prev_total + Decimal(total or 0), _latest(prev_last, last))
    return combined


def _debit_totals(session, start: datetime, end: datetime) -> dict[int, tuple[Decimal, datetime | None]]:
    rows = (
        session.query(
            OwnerPayment.owner_id,
            func.coalesce(func.sum(OwnerPayment.amount), 0),
            func.max(OwnerPayment.payment_date),
        )
        .filter(OwnerPayment.payment_date >= start, OwnerPayment.payment_date < end)
        .group_by(OwnerPayment.owner_id)
        .all()
    )
    return {owner_id: (Decimal(total or 0), last) for owner_id, total, last in rows}


def _latest(a: datetime | None, b: datetime | None) -> datetime | None:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def owners_summary(
    session,
    *,
    date_from: str | None = None,
    date_to: str | None = None,
    tz_name: str | None = None,
    sort: str = SORT_BY_NAME,
) -> dict:
    """
    Collectability snapshot per owner for an inclusive business-date range.

    Every owner appears, including ones with no activity (zero totals, null
    last_activity).
    """
    if sort not in (SORT_BY_NAME, SORT_BY_ACTIVITY):
        raise ValidationError("sort must be name or activity")

    start_day, end_day = resolve_range(date_from, date_to, tz_name=tz_name)
    start, end = business_range_bounds(start_day, end_day, tz_name)

    credits = _credit_totals(session, start, end)
    debits = _debit_totals(session, start, end)

    rows = []
    for owner in session.query(Owner).order_by(Owner.name.asc(), Owner.owner_id.asc()).all():
        total_credit, last_credit = credits.get(owner.owner_id, (_ZERO, None))
        total_debit, last_debit = debits.get(owner.owner_id, (_ZERO, None))
        rows.append(
            {
                "owner_id": owner.owner_id,
                "owner_name": owner.name,
                "is_active": owner.is_active,
                "total_credit": total_credit,
                "total_debit": total_debit,
                "balance": total_credit - total_debit,
                "last_activity": _latest(last_credit, last_debit),
            }
        )

    if sort == SORT_BY_ACTIVITY:
        # Latest activity first; owners without activity keep name order at the end
        active = [r for r in rows if r["last_activity"] is not None]
        idle = [r for r in rows if r["last_activity"] is None]
        active.sort(key=lambda r: r["last_activity"], reverse=True)
        rows = active + idle

    return {
        "from": start_day.isoformat(),
        "to": end_day.isoformat(),
        "owners": [
            {
                **r,
                "total_credit": as_number(r["total_credit"]),
                "total_debit": as_number(r["total_debit"]),
                "balance": as_number(r["balance"]),
                "last_activity": to_utc_z(r["last_activity"]),
            }
            for r in rows
        ],
    }


def period_report(
    session,
    *,
    date_from: str | None,
    date_to: str | None,
    tz_name: str | None = None,
) -> dict:
    """
    Owner -> business date -> line items, for an inclusive date range.

    Uses the ledger ordering. The running balance per owner starts at zero at
    the range start and carries across days; each day reports its credit
    subtotal (day_total), debit subtotal (paid) and end-of-day balance.
    """
    start_day, end_day = resolve_range(date_from, date_to, tz_name=tz_name, require_both=True)
    start, end = business_range_bounds(start_day, end_day, tz_name)

    events = collect_events(session, start=start, end=end, payment_label="PAID")
    owner_names = {
        o.owner_id: o.name
        for o in session.query(Owner).filter(Owner.owner_id.in_({ev.owner_id for ev in events})).all()
    } if events else {}

    by_owner: dict[int, list] = {}
    for ev in order_events(events):
        by_owner.setdefault(ev.owner_id, []).append(ev)

    owners_out = []
    for owner_id in sorted(by_owner, key=lambda oid: (owner_names.get(oid) or "", oid)):
        days: dict[date, dict] = {}
        for ev, balance in running_balance(by_owner[owner_id]):
            day_key = to_business_date(ev.occurred_at, tz_name)
            day = days.get(day_key)
            if day is None:
                day = {"date": day_key.isoformat(), "items": [], "day_total": _ZERO, "paid": _ZERO, "balance": _ZERO}
                days[day_key] = day

            if ev.entry_type == CREDIT:
                day["items"].append(
                    {
                        "material": ev.description,
                        "qty": as_number(ev.quantity),
                        "rate": as_number(ev.rate_at_sale),
                        "total": as_number(ev.amount),
                    }
                )
                day["day_total"] += ev.amount
            else:
                day["items"].append({"material": ev.description, "qty": None, "rate": None, "total": as_number(ev.amount)})
                day["paid"] += ev.amount
            day["balance"] = balance

        owners_out.append(
            {
                "owner_id": owner_id,
                "owner_name": owner_names.get(owner_id),
                "entries": [
                    {
                        **day,
                        "day_total": as_number(day["day_total"]),
                        "paid": as_number(day["paid"]),
                        "balance": as_number(day["balance"]),
                    }
                    for day in days.values()
                ],
            }
        )

    return {"from": start_day.isoformat(), "to": end_day.isoformat(), "owners": owners_out}
