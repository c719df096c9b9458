# Overview: Service-layer operations for per-day bill numbering.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select

from ..models import Bill, DailyBillSequence
from agency.time_utils import business_day_bounds, to_business_date
from .upsert import dialect_insert


def next_daily_bill_no(session, *, at: datetime, tz_name: str | None = None) -> int:
    """
    Allocate the next daily bill number for the business day containing `at`.

    Runs inside the caller's transaction, so a rolled-back bill also rolls back
    its number. The first allocation of a day seeds the counter from the bills
    already stamped that day, which keeps numbering identical to "count today's
    bills + 1" for data written before the counter existed. Later allocations
    are a single UPDATE, whose row lock serializes concurrent callers.
    """
    day = to_business_date(at, tz_name)
    start, end = business_day_bounds(day, tz_name)

    existing = (
        select(func.count(Bill.bill_id))
        .where(Bill.bill_timestamp >= start, Bill.bill_timestamp < end)
        .scalar_subquery()
    )

    stmt = dialect_insert(session, DailyBillSequence).values(
        business_date=day,
        last_number=existing + 1,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["business_date"],
        set_={"last_number": DailyBillSequence.last_number + 1},
    )
    session.execute(stmt)

    return session.execute(
        select(DailyBillSequence.last_number).where(DailyBillSequence.business_date == day)
    ).scalar_one()
