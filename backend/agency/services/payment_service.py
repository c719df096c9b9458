# Overview: Service-layer operations for owner payments (ledger debits).

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..models import Owner, OwnerPayment
from ..validation import MONEY_PLACES, NotFoundError, TransactionAbortError, ValidationError, to_positive_decimal
from agency.time_utils import parse_business_moment, utcnow

logger = logging.getLogger(__name__)


def _clean_text(value) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def record_payment(
    session,
    *,
    owner_id: int,
    amount,
    mode: str | None = None,
    notes: str | None = None,
    payment_date: str | None = None,
    tz_name: str | None = None,
) -> OwnerPayment:
    """
    Append one payment row.

    No balance is recomputed or stored: the ledger derives balances on read.
    payment_date accepts a bare business date, an ISO datetime, or nothing
    (submission time).
    """
    if amount in (None, ""):
        raise ValidationError("Valid amount is required")
    amount = to_positive_decimal(amount, "amount", places=MONEY_PLACES)

    try:
        paid_at = parse_business_moment(payment_date, tz_name) if payment_date else None
    except ValueError:
        raise ValidationError("payment_date must be YYYY-MM-DD or an ISO-8601 datetime")

    if session.get(Owner, owner_id) is None:
        raise NotFoundError("Owner not found")

    payment = OwnerPayment(
        owner_id=owner_id,
        amount=amount,
        mode=_clean_text(mode),
        notes=_clean_text(notes),
        payment_date=paid_at or utcnow(),
    )
    session.add(payment)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise TransactionAbortError("Failed to record payment") from exc

    logger.info("Payment %s of %s recorded for owner %s", payment.payment_id, amount, owner_id)
    return payment


def list_payments(session, owner_id: int) -> list[OwnerPayment]:
    if session.get(Owner, owner_id) is None:
        raise NotFoundError("Owner not found")
    return (
        session.query(OwnerPayment)
        .filter(OwnerPayment.owner_id == owner_id)
        .order_by(OwnerPayment.payment_date.desc(), OwnerPayment.payment_id.desc())
        .all()
    )
