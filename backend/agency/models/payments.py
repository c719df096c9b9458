from __future__ import annotations

from ..extensions import db
from agency.time_utils import to_utc_z
from agency.validation import as_number


class OwnerPayment(db.Model):
    """Append-only payment received from an owner (ledger debit)."""
    __tablename__ = "owner_payments"
    __table_args__ = (
        db.Index("ix_owner_payments_owner_date", "owner_id", "payment_date"),
        {"sqlite_autoincrement": True},
    )

    payment_id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("vehicle_owners.owner_id"), nullable=False)
    amount = db.Column(db.Numeric(14, 2), nullable=False)

    # Free-form: CASH, UPI, BANK, ...
    mode = db.Column(db.String(32), nullable=True)
    notes = db.Column(db.String(255), nullable=True)

    payment_date = db.Column(db.DateTime(timezone=True), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    owner = db.relationship("Owner", backref=db.backref("payments", lazy=True))

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "owner_id": self.owner_id,
            "amount": as_number(self.amount),
            "mode": self.mode,
            "notes": self.notes,
            "payment_date": to_utc_z(self.payment_date),
            "created_at": to_utc_z(self.created_at),
        }
