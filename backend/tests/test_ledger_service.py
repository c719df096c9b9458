# Overview: Pytest coverage for the owner ledger and payments.

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from agency.models import OwnerPass, OwnerPayment, Transaction
from agency.services.ledger_service import CREDIT, DEBIT, owner_ledger
from agency.services.payment_service import list_payments, record_payment
from agency.validation import NotFoundError, ValidationError

T0 = datetime(2026, 10, 1, 4, 0, 0)


def _sale(session, owner, material, qty, at, bill_id=None):
    rate = Decimal(material.rate_per_unit)
    tx = Transaction(
        owner_id=owner.owner_id,
        material_id=material.material_id,
        vehicle_number="TN01",
        quantity=Decimal(qty),
        rate_at_sale=rate,
        total_cost=Decimal(qty) * rate,
        bill_id=bill_id,
        transaction_timestamp=at,
    )
    session.add(tx)
    session.commit()
    return tx


def _pass(session, owner, at, amount="200"):
    row = OwnerPass(owner_id=owner.owner_id, vehicle_number="TN01", pass_amount=Decimal(amount), pass_date=at)
    session.add(row)
    session.commit()
    return row


def _payment(session, owner, amount, at, notes=None):
    row = OwnerPayment(owner_id=owner.owner_id, amount=Decimal(amount), notes=notes, payment_date=at)
    session.add(row)
    session.commit()
    return row


class TestLedgerOrdering:
    def test_chronological_with_running_balance(self, db_session, owner, sand):
        """balance(k) = credits - debits among the first k events."""
        _sale(db_session, owner, sand, 10, T0)                      # +500
        _payment(db_session, owner, "200", T0 + timedelta(hours=1))  # -200
        _pass(db_session, owner, T0 + timedelta(hours=2))           # +200

        entries = owner_ledger(db_session, owner.owner_id)

        assert [e["source"] for e in entries] == ["transaction", "payment", "pass"]
        assert [e["balance"] for e in entries] == [500, 300, 500]
        assert [e["signed_amount"] for e in entries] == [500, -200, 200]

    def test_credit_before_debit_on_same_timestamp(self, db_session, owner, sand):
        pay = _payment(db_session, owner, "100", T0)
        tx = _sale(db_session, owner, sand, 2, T0)

        entries = owner_ledger(db_session, owner.owner_id)

        assert [(e["entry_type"], e["id"]) for e in entries] == [
            (CREDIT, tx.transaction_id),
            (DEBIT, pay.payment_id),
        ]
        assert [e["balance"] for e in entries] == [100, 0]

    def test_same_timestamp_credits_by_id(self, db_session, owner, sand, cement):
        """Rows of one bill share a timestamp and fall back to id order."""
        first = _sale(db_session, owner, sand, 1, T0)
        second = _sale(db_session, owner, cement, 1, T0)

        entries = owner_ledger(db_session, owner.owner_id)
        assert [e["id"] for e in entries] == [first.transaction_id, second.transaction_id]
        assert [e["balance"] for e in entries] == [50, 340]

    def test_entry_fields(self, db_session, owner, sand):
        _sale(db_session, owner, sand, 3, T0)
        _payment(db_session, owner, "20", T0 + timedelta(days=1), notes="UPI ref 42")

        sale, pay = owner_ledger(db_session, owner.owner_id)

        assert sale["material_name"] == "M-Sand 1"
        assert sale["quantity"] == 3
        assert sale["rate_at_sale"] == 50
        assert sale["credit_amount"] == 150
        assert sale["debit_amount"] == 0
        assert sale["entry_date"] == "2026-10-01T04:00:00Z"

        assert pay["material_name"] == "UPI ref 42"
        assert pay["quantity"] is None
        assert pay["debit_amount"] == 20

    def test_pass_label(self, db_session, owner):
        _pass(db_session, owner, T0)
        entries = owner_ledger(db_session, owner.owner_id)
        assert entries[0]["material_name"] == "PASS"
        assert entries[0]["balance"] == 200

    def test_other_owner_excluded(self, db_session, owner, other_owner, sand):
        _sale(db_session, other_owner, sand, 5, T0)
        assert owner_ledger(db_session, owner.owner_id) == []

    def test_unknown_owner(self, db_session):
        with pytest.raises(NotFoundError):
            owner_ledger(db_session, 99999)


class TestPayments:
    def test_payment_lowers_later_balances(self, db_session, owner, sand):
        """A payment of A lowers every later balance entry by A."""
        _sale(db_session, owner, sand, 10, T0)
        _sale(db_session, owner, sand, 4, T0 + timedelta(days=2))
        before = owner_ledger(db_session, owner.owner_id)

        record_payment(
            db_session,
            owner_id=owner.owner_id,
            amount="150",
            payment_date="2026-10-02T00:00:00Z",
        )
        after = owner_ledger(db_session, owner.owner_id)

        assert [e["balance"] for e in before] == [500, 700]
        assert [e["balance"] for e in after] == [500, 350, 550]

    def test_bare_date_is_business_midnight(self, db_session, owner):
        payment = record_payment(
            db_session,
            owner_id=owner.owner_id,
            amount=100,
            payment_date="2026-10-05",
            tz_name="Asia/Kolkata",
        )
        # 00:00 IST is 18:30 UTC on the previous day
        assert payment.payment_date.replace(tzinfo=None) == datetime(2026, 10, 4, 18, 30)

    def test_defaults_to_now(self, db_session, owner):
        payment = record_payment(db_session, owner_id=owner.owner_id, amount="75.50", mode=" CASH ", notes="")
        assert payment.payment_date is not None
        assert payment.mode == "CASH"
        assert payment.notes is None
        assert Decimal(payment.amount) == Decimal("75.50")

    @pytest.mark.parametrize("amount", [None, "", "abc", 0, -5, True, "0.001", "10.005"])
    def test_invalid_amount(self, db_session, owner, amount):
        with pytest.raises(ValidationError):
            record_payment(db_session, owner_id=owner.owner_id, amount=amount)
        assert db_session.query(OwnerPayment).count() == 0

    def test_invalid_date(self, db_session, owner):
        with pytest.raises(ValidationError):
            record_payment(db_session, owner_id=owner.owner_id, amount=10, payment_date="05/10/2026")

    def test_unknown_owner(self, db_session):
        with pytest.raises(NotFoundError):
            record_payment(db_session, owner_id=99999, amount=10)

    def test_list_newest_first(self, db_session, owner):
        older = _payment(db_session, owner, "10", T0)
        newer = _payment(db_session, owner, "20", T0 + timedelta(days=1))

        assert [p.payment_id for p in list_payments(db_session, owner.owner_id)] == [
            newer.payment_id,
            older.payment_id,
        ]

    def test_amount_stored_exactly(self, db_session, owner):
        payment = record_payment(db_session, owner_id=owner.owner_id, amount="0.01")
        payment_id = payment.payment_id
        db_session.expire_all()

        assert Decimal(db_session.get(OwnerPayment, payment_id).amount) == Decimal("0.01")
