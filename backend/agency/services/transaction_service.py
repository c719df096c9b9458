# Overview: Error-correction operations on individual transaction lines.

from __future__ import annotations

from ..models import Owner, Transaction
from ..validation import (
    MONEY_PLACES,
    QUANTITY_PLACES,
    NotFoundError,
    ValidationError,
    check_max_length,
    check_places,
    to_decimal,
    to_money,
    to_positive_decimal,
)
from .bill_service import recompute_bill_total
from .vehicle_service import VEHICLE_NUMBER_MAX_LENGTH, normalize_vehicle_number


def get_transaction(session, transaction_id: int) -> Transaction:
    tx = session.get(Transaction, transaction_id)
    if tx is None:
        raise NotFoundError("Transaction not found")
    return tx


def list_owner_transactions(session, owner_id: int) -> list[Transaction]:
    if session.get(Owner, owner_id) is None:
        raise NotFoundError("Owner not found")
    return (
        session.query(Transaction)
        .filter(Transaction.owner_id == owner_id)
        .order_by(Transaction.transaction_timestamp.asc(), Transaction.transaction_id.asc())
        .all()
    )


def update_transaction(
    session,
    transaction_id: int,
    *,
    vehicle_number,
    quantity,
    rate_at_sale,
) -> Transaction:
    """
    Correct a recorded line. total_cost is recomputed from the supplied
    quantity and rate, and the parent bill total follows.
    """
    vehicle = normalize_vehicle_number(vehicle_number)
    if not vehicle:
        raise ValidationError("vehicle_number is required")
    check_max_length(vehicle, VEHICLE_NUMBER_MAX_LENGTH, "vehicle_number")
    qty = to_positive_decimal(quantity, "quantity", places=QUANTITY_PLACES)
    rate = check_places(to_decimal(rate_at_sale, "rate_at_sale"), MONEY_PLACES, "rate_at_sale")
    if rate < 0:
        raise ValidationError("rate_at_sale must be >= 0")

    tx = get_transaction(session, transaction_id)
    tx.vehicle_number = vehicle
    tx.quantity = qty
    tx.rate_at_sale = rate
    tx.total_cost = to_money(qty * rate)

    if tx.bill_id is not None:
        session.flush()
        recompute_bill_total(session, tx.bill_id)
    session.commit()
    return tx


def delete_transaction(session, transaction_id: int) -> dict:
    """Remove a line; returns its last state for the response body."""
    tx = get_transaction(session, transaction_id)
    snapshot = tx.to_dict()
    bill_id = tx.bill_id

    session.delete(tx)
    session.flush()
    if bill_id is not None:
        recompute_bill_total(session, bill_id)
    session.commit()
    return snapshot
