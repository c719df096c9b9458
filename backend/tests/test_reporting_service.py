# Overview: Pytest coverage for the owners summary and the weekly grouped report.

from datetime import datetime
from decimal import Decimal

import pytest

from agency.models import OwnerPass, OwnerPayment, Transaction
from agency.services.bill_service import create_bill
from agency.services.payment_service import record_payment
from agency.services.reporting_service import owners_summary, period_report, resolve_range
from agency.validation import ValidationError

TZ = "Asia/Kolkata"


def _sale(session, owner, material, qty, at):
    rate = Decimal(material.rate_per_unit)
    session.add(Transaction(
        owner_id=owner.owner_id,
        material_id=material.material_id,
        vehicle_number="TN01",
        quantity=Decimal(qty),
        rate_at_sale=rate,
        total_cost=Decimal(qty) * rate,
        transaction_timestamp=at,
    ))
    session.commit()


def _payment(session, owner, amount, at):
    session.add(OwnerPayment(owner_id=owner.owner_id, amount=Decimal(amount), payment_date=at))
    session.commit()


def _row(report, owner):
    return next(r for r in report["owners"] if r["owner_id"] == owner.owner_id)


class TestOwnersSummary:
    def test_today_sale_and_payment(self, db_session, owner, sand):
        """10 x 50 sold and 200 paid today -> credit 500, debit 200, balance 300."""
        create_bill(
            db_session,
            owner_id=owner.owner_id,
            vehicle_number="TN01",
            items=[{"material_id": sand.material_id, "quantity": 10}],
            tz_name=TZ,
        )
        record_payment(db_session, owner_id=owner.owner_id, amount=200, tz_name=TZ)

        row = _row(owners_summary(db_session, tz_name=TZ), owner)
        assert row["total_credit"] == 500
        assert row["total_debit"] == 200
        assert row["balance"] == 300
        assert row["last_activity"] is not None

    def test_idle_owner_listed_with_zeros(self, db_session, owner, other_owner, sand):
        _sale(db_session, other_owner, sand, 1, datetime(2026, 10, 1, 6, 0))

        report = owners_summary(db_session, date_from="2026-10-01", date_to="2026-10-01", tz_name=TZ)
        row = _row(report, owner)

        assert row["total_credit"] == 0
        assert row["total_debit"] == 0
        assert row["balance"] == 0
        assert row["last_activity"] is None
        assert [r["owner_name"] for r in report["owners"]] == ["AARON", "BALA JCB"]

    def test_range_is_business_days(self, db_session, owner, sand):
        """18:30 UTC is already the next day in IST."""
        _sale(db_session, owner, sand, 1, datetime(2026, 10, 1, 18, 29))  # Oct 1 IST
        _sale(db_session, owner, sand, 2, datetime(2026, 10, 1, 18, 30))  # Oct 2 IST

        oct1 = _row(owners_summary(db_session, date_from="2026-10-01", date_to="2026-10-01", tz_name=TZ), owner)
        oct2 = _row(owners_summary(db_session, date_from="2026-10-02", tz_name=TZ), owner)

        assert oct1["total_credit"] == 50
        assert oct2["total_credit"] == 100

    def test_pass_counts_as_credit(self, db_session, owner):
        db_session.add(OwnerPass(owner_id=owner.owner_id, vehicle_number="TN01",
                                 pass_amount=Decimal("200"), pass_date=datetime(2026, 10, 1, 6, 0)))
        db_session.commit()

        row = _row(owners_summary(db_session, date_from="2026-10-01", date_to="2026-10-01", tz_name=TZ), owner)
        assert row["total_credit"] == 200
        assert row["last_activity"] == "2026-10-01T06:00:00Z"

    def test_sort_by_activity(self, db_session, owner, other_owner, sand):
        _sale(db_session, owner, sand, 1, datetime(2026, 10, 1, 5, 0))
        _payment(db_session, other_owner, "10", datetime(2026, 10, 1, 9, 0))

        report = owners_summary(db_session, date_from="2026-10-01", date_to="2026-10-01",
                                tz_name=TZ, sort="activity")
        assert [r["owner_id"] for r in report["owners"]] == [other_owner.owner_id, owner.owner_id]

    def test_bad_sort(self, db_session):
        with pytest.raises(ValidationError):
            owners_summary(db_session, tz_name=TZ, sort="balance")


class TestResolveRange:
    def test_one_side_fills_other(self):
        start, end = resolve_range("2026-10-03", None, tz_name=TZ)
        assert start == end

    def test_reversed_range(self):
        with pytest.raises(ValidationError):
            resolve_range("2026-10-05", "2026-10-01", tz_name=TZ)

    def test_malformed(self):
        with pytest.raises(ValidationError):
            resolve_range("yesterday", None, tz_name=TZ)

    def test_both_required(self):
        with pytest.raises(ValidationError):
            resolve_range("2026-10-01", None, tz_name=TZ, require_both=True)


class TestPeriodReport:
    def test_grouped_by_owner_and_day(self, db_session, owner, sand, cement):
        _sale(db_session, owner, sand, 10, datetime(2026, 10, 1, 4, 0))     # 500
        _sale(db_session, owner, cement, 1, datetime(2026, 10, 1, 5, 0))    # 290
        _payment(db_session, owner, "300", datetime(2026, 10, 1, 10, 0))
        _sale(db_session, owner, sand, 2, datetime(2026, 10, 2, 4, 0))      # 100

        report = period_report(db_session, date_from="2026-10-01", date_to="2026-10-07", tz_name=TZ)

        assert report["from"] == "2026-10-01"
        assert report["to"] == "2026-10-07"
        (block,) = report["owners"]
        assert block["owner_name"] == "AARON"

        day1, day2 = block["entries"]
        assert day1["date"] == "2026-10-01"
        assert [i["material"] for i in day1["items"]] == ["M-Sand 1", "Cement", "PAID"]
        assert day1["items"][0] == {"material": "M-Sand 1", "qty": 10, "rate": 50, "total": 500}
        assert day1["items"][2] == {"material": "PAID", "qty": None, "rate": None, "total": 300}
        assert day1["day_total"] == 790
        assert day1["paid"] == 300
        assert day1["balance"] == 490

        assert day2["date"] == "2026-10-02"
        assert day2["day_total"] == 100
        assert day2["paid"] == 0
        assert day2["balance"] == 590

    def test_balance_starts_at_range(self, db_session, owner, sand):
        _sale(db_session, owner, sand, 10, datetime(2026, 9, 20, 4, 0))
        _sale(db_session, owner, sand, 1, datetime(2026, 10, 1, 4, 0))

        report = period_report(db_session, date_from="2026-10-01", date_to="2026-10-01", tz_name=TZ)
        assert report["owners"][0]["entries"][0]["balance"] == 50

    def test_owners_without_events_omitted(self, db_session, owner, other_owner, sand):
        _sale(db_session, other_owner, sand, 1, datetime(2026, 10, 1, 4, 0))

        report = period_report(db_session, date_from="2026-10-01", date_to="2026-10-01", tz_name=TZ)
        assert [o["owner_id"] for o in report["owners"]] == [other_owner.owner_id]

    def test_dates_required(self, db_session):
        with pytest.raises(ValidationError):
            period_report(db_session, date_from=None, date_to="2026-10-01", tz_name=TZ)
