from __future__ import annotations

from ..extensions import db
from agency.time_utils import to_utc_z
from agency.validation import as_number


class Bill(db.Model):
    """
    Bill header grouping the transactions created by one request.

    total_amount = sum(transactions.total_cost) + pass amount (if included).
    daily_bill_no restarts at 1 every business day; it is not globally unique.
    """
    __tablename__ = "bills"
    __table_args__ = (
        db.Index("ix_bills_owner_timestamp", "owner_id", "bill_timestamp"),
        {"sqlite_autoincrement": True},
    )

    bill_id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("vehicle_owners.owner_id"), nullable=False)
    vehicle_number = db.Column(db.String(32), nullable=False)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    daily_bill_no = db.Column(db.Integer, nullable=False)
    include_pass = db.Column(db.Boolean, nullable=False, default=False)
    bill_timestamp = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    owner = db.relationship("Owner")

    def to_dict(self) -> dict:
        return {
            "bill_id": self.bill_id,
            "owner_id": self.owner_id,
            "vehicle_number": self.vehicle_number,
            "total_amount": as_number(self.total_amount),
            "daily_bill_no": self.daily_bill_no,
            "include_pass": self.include_pass,
            "bill_timestamp": to_utc_z(self.bill_timestamp),
        }


class Transaction(db.Model):
    """
    One material sale line.

    rate_at_sale is copied from the material at creation time and is never
    recomputed from the catalog. mattam / grill_mattam / mattam_checked are
    display-only annotations for the printed bill.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_owner_timestamp", "owner_id", "transaction_timestamp"),
        {"sqlite_autoincrement": True},
    )

    transaction_id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("vehicle_owners.owner_id"), nullable=False)
    material_id = db.Column(db.Integer, db.ForeignKey("materials.material_id"), nullable=False)
    vehicle_number = db.Column(db.String(32), nullable=False)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    rate_at_sale = db.Column(db.Numeric(12, 2), nullable=False)
    total_cost = db.Column(db.Numeric(14, 2), nullable=False)
    bill_id = db.Column(db.Integer, db.ForeignKey("bills.bill_id"), nullable=True, index=True)

    mattam = db.Column(db.String(64), nullable=True)
    grill_mattam = db.Column(db.Boolean, nullable=False, default=False)
    mattam_checked = db.Column(db.Boolean, nullable=False, default=False)

    transaction_timestamp = db.Column(db.DateTime(timezone=True), nullable=False)

    material = db.relationship("Material")
    bill = db.relationship("Bill", backref=db.backref("transactions", lazy=True, order_by="Transaction.transaction_id"))

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "owner_id": self.owner_id,
            "material_id": self.material_id,
            "vehicle_number": self.vehicle_number,
            "quantity": as_number(self.quantity),
            "rate_at_sale": as_number(self.rate_at_sale),
            "total_cost": as_number(self.total_cost),
            "bill_id": self.bill_id,
            "mattam": self.mattam,
            "grill_mattam": self.grill_mattam,
            "mattam_checked": self.mattam_checked,
            "transaction_timestamp": to_utc_z(self.transaction_timestamp),
        }


class OwnerPass(db.Model):
    """Flat pass surcharge credited to the owner's ledger alongside a bill."""
    __tablename__ = "owner_passes"
    __table_args__ = (
        db.Index("ix_owner_passes_owner_date", "owner_id", "pass_date"),
        {"sqlite_autoincrement": True},
    )

    pass_id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("vehicle_owners.owner_id"), nullable=False)
    vehicle_number = db.Column(db.String(32), nullable=False)
    pass_amount = db.Column(db.Numeric(12, 2), nullable=False)
    bill_id = db.Column(db.Integer, db.ForeignKey("bills.bill_id"), nullable=True, index=True)
    pass_date = db.Column(db.DateTime(timezone=True), nullable=False)

    bill = db.relationship("Bill", backref=db.backref("passes", lazy=True))

    def to_dict(self) -> dict:
        return {
            "pass_id": self.pass_id,
            "owner_id": self.owner_id,
            "vehicle_number": self.vehicle_number,
            "pass_amount": as_number(self.pass_amount),
            "bill_id": self.bill_id,
            "pass_date": to_utc_z(self.pass_date),
        }


class DailyBillSequence(db.Model):
    """Per-business-day counter behind Bill.daily_bill_no."""
    __tablename__ = "daily_bill_sequences"

    business_date = db.Column(db.Date, primary_key=True)
    last_number = db.Column(db.Integer, nullable=False, default=0)
