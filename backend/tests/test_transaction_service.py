# Overview: Pytest coverage for transaction-line corrections.

from decimal import Decimal

import pytest

from agency.models import Bill, Transaction
from agency.services.bill_service import create_bill
from agency.services.transaction_service import delete_transaction, list_owner_transactions, update_transaction
from agency.validation import NotFoundError, ValidationError


@pytest.fixture
def bill_result(db_session, owner, sand, cement):
    return create_bill(
        db_session,
        owner_id=owner.owner_id,
        vehicle_number="TN01",
        items=[
            {"material_id": sand.material_id, "quantity": 10},
            {"material_id": cement.material_id, "quantity": 1},
        ],
        include_pass=True,
        tz_name="Asia/Kolkata",
    )


class TestTransactionCorrections:
    def test_update_recomputes_line_and_bill(self, db_session, bill_result):
        tx_id = bill_result.items[0].transaction_id
        bill_id = bill_result.bill.bill_id

        tx = update_transaction(db_session, tx_id, vehicle_number="tn 02", quantity="4", rate_at_sale="55")

        assert tx.vehicle_number == "TN02"
        assert Decimal(tx.total_cost) == Decimal("220")
        # 220 + 290 + 200 pass
        assert Decimal(db_session.get(Bill, bill_id).total_amount) == Decimal("710")

    def test_update_validation(self, db_session, bill_result):
        tx_id = bill_result.items[0].transaction_id
        with pytest.raises(ValidationError):
            update_transaction(db_session, tx_id, vehicle_number="TN01", quantity=0, rate_at_sale=50)
        with pytest.raises(ValidationError):
            update_transaction(db_session, tx_id, vehicle_number="TN01", quantity=1, rate_at_sale=-1)
        with pytest.raises(ValidationError):
            update_transaction(db_session, tx_id, vehicle_number="", quantity=1, rate_at_sale=1)

    def test_update_rounds_line_to_cents(self, db_session, bill_result):
        tx_id = bill_result.items[0].transaction_id
        bill_id = bill_result.bill.bill_id

        update_transaction(db_session, tx_id, vehicle_number="TN01", quantity="0.333", rate_at_sale="0.05")
        db_session.expire_all()

        # 0.333 x 0.05 = 0.01665
        assert Decimal(db_session.get(Transaction, tx_id).total_cost) == Decimal("0.02")
        assert Decimal(db_session.get(Bill, bill_id).total_amount) == Decimal("490.02")

    @pytest.mark.parametrize("quantity, rate", [("1.2345", "50"), ("1", "50.005")])
    def test_update_precision_rejected(self, db_session, bill_result, quantity, rate):
        tx_id = bill_result.items[0].transaction_id
        with pytest.raises(ValidationError):
            update_transaction(db_session, tx_id, vehicle_number="TN01", quantity=quantity, rate_at_sale=rate)

        db_session.expire_all()
        assert Decimal(db_session.get(Transaction, tx_id).total_cost) == Decimal("500")

    def test_update_long_vehicle_rejected(self, db_session, bill_result):
        tx_id = bill_result.items[0].transaction_id
        with pytest.raises(ValidationError):
            update_transaction(db_session, tx_id, vehicle_number="TN" + "1" * 40, quantity=1, rate_at_sale=50)

    def test_update_missing(self, db_session):
        with pytest.raises(NotFoundError):
            update_transaction(db_session, 99999, vehicle_number="TN01", quantity=1, rate_at_sale=1)

    def test_delete_recomputes_bill(self, db_session, bill_result):
        tx_id = bill_result.items[1].transaction_id
        bill_id = bill_result.bill.bill_id

        snapshot = delete_transaction(db_session, tx_id)

        assert snapshot["transaction_id"] == tx_id
        assert db_session.get(Transaction, tx_id) is None
        assert Decimal(db_session.get(Bill, bill_id).total_amount) == Decimal("700")

    def test_list_for_owner(self, db_session, owner, bill_result):
        rows = list_owner_transactions(db_session, owner.owner_id)
        assert [t.transaction_id for t in rows] == [t.transaction_id for t in bill_result.items]
