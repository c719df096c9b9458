# Overview: Service-layer operations for the owner ledger; merges credits and debits into one running balance.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator

from ..models import Material, Owner, OwnerPass, OwnerPayment, Transaction
from ..validation import NotFoundError, as_number
from agency.time_utils import to_utc_z

"""
Owner Ledger Invariants (authoritative)

- Balances are never stored; they are derived on every read.
- Three sources feed the ledger: material transactions (CREDIT),
  passes (CREDIT) and payments (DEBIT).
- Order: occurred_at ASC, then CREDIT before DEBIT, then source id ASC.
  A final source rank (transaction < pass < payment) makes the order total.
  Rows of one bill share a timestamp, so the tie-break decides the balance
  sequence users see and must not change.
- balance(k) = sum(credits among first k) - sum(debits among first k).
"""

CREDIT = "CREDIT"
DEBIT = "DEBIT"

_SOURCE_RANK = {"transaction": 0, "pass": 1, "payment": 2}


@dataclass(frozen=True)
class LedgerEvent:
    owner_id: int
    source: str
    id: int
    occurred_at: datetime
    entry_type: str
    description: str
    amount: Decimal
    vehicle_number: str | None = None
    quantity: Decimal | None = None
    rate_at_sale: Decimal | None = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.entry_type == CREDIT else -self.amount

    @property
    def sort_key(self) -> tuple:
        return (
            self.occurred_at,
            0 if self.entry_type == CREDIT else 1,
            self.id,
            _SOURCE_RANK[self.source],
        )


def collect_events(
    session,
    *,
    owner_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    payment_label: str | None = None,
) -> list[LedgerEvent]:
    """
    Union of the three ledger sources, optionally scoped to one owner and a
    UTC-naive half-open [start, end) window. Not ordered; see order_events.

    payment_label overrides the debit description (the period report prints
    "PAID"); otherwise the payment note is used, falling back to "Payment".
    """
    tx_q = (
        session.query(Transaction, Material.name)
        .join(Material, Material.material_id == Transaction.material_id)
    )
    pass_q = session.query(OwnerPass)
    pay_q = session.query(OwnerPayment)

    if owner_id is not None:
        tx_q = tx_q.filter(Transaction.owner_id == owner_id)
        pass_q = pass_q.filter(OwnerPass.owner_id == owner_id)
        pay_q = pay_q.filter(OwnerPayment.owner_id == owner_id)
    if start is not None:
        tx_q = tx_q.filter(Transaction.transaction_timestamp >= start)
        pass_q = pass_q.filter(OwnerPass.pass_date >= start)
        pay_q = pay_q.filter(OwnerPayment.payment_date >= start)
    if end is not None:
        tx_q = tx_q.filter(Transaction.transaction_timestamp < end)
        pass_q = pass_q.filter(OwnerPass.pass_date < end)
        pay_q = pay_q.filter(OwnerPayment.payment_date < end)

    events: list[LedgerEvent] = []
    for tx, material_name in tx_q.all():
        events.append(
            LedgerEvent(
                owner_id=tx.owner_id,
                source="transaction",
                id=tx.transaction_id,
                occurred_at=tx.transaction_timestamp,
                entry_type=CREDIT,
                description=material_name,
                amount=Decimal(tx.total_cost),
                vehicle_number=tx.vehicle_number,
                quantity=Decimal(tx.quantity),
                rate_at_sale=Decimal(tx.rate_at_sale),
            )
        )
    for p in pass_q.all():
        events.append(
            LedgerEvent(
                owner_id=p.owner_id,
                source="pass",
                id=p.pass_id,
                occurred_at=p.pass_date,
                entry_type=CREDIT,
                description="PASS",
                amount=Decimal(p.pass_amount),
                vehicle_number=p.vehicle_number,
            )
        )
    for pay in pay_q.all():
        events.append(
            LedgerEvent(
                owner_id=pay.owner_id,
                source="payment",
                id=pay.payment_id,
                occurred_at=pay.payment_date,
                entry_type=DEBIT,
                description=payment_label or pay.notes or "Payment",
                amount=Decimal(pay.amount),
            )
        )
    return events


def order_events(events: Iterable[LedgerEvent]) -> list[LedgerEvent]:
    return sorted(events, key=lambda ev: ev.sort_key)


def running_balance(events: Iterable[LedgerEvent]) -> Iterator[tuple[LedgerEvent, Decimal]]:
    """Prefix sum over already-ordered events; yields (event, balance after it)."""
    balance = Decimal("0")
    for ev in events:
        balance += ev.signed_amount
        yield ev, balance


def ledger_entry_dict(ev: LedgerEvent, balance: Decimal) -> dict:
    return {
        "id": ev.id,
        "source": ev.source,
        "entry_date": to_utc_z(ev.occurred_at),
        "entry_type": ev.entry_type,
        "material_name": ev.description,
        "vehicle_number": ev.vehicle_number,
        "quantity": as_number(ev.quantity),
        "rate_at_sale": as_number(ev.rate_at_sale),
        "amount": as_number(ev.amount),
        "signed_amount": as_number(ev.signed_amount),
        "credit_amount": as_number(ev.amount if ev.entry_type == CREDIT else Decimal("0")),
        "debit_amount": as_number(ev.amount if ev.entry_type == DEBIT else Decimal("0")),
        "balance": as_number(balance),
    }


def owner_ledger(session, owner_id: int) -> list[dict]:
    """
    Full ledger for one owner, oldest first, each row carrying the running
    balance. An owner without events yields an empty list.
    """
    if session.get(Owner, owner_id) is None:
        raise NotFoundError("Owner not found")

    ordered = order_events(collect_events(session, owner_id=owner_id))
    return [ledger_entry_dict(ev, bal) for ev, bal in running_balance(ordered)]
