from __future__ import annotations

from ..extensions import db
from agency.time_utils import to_utc_z
from agency.validation import as_number


class Material(db.Model):
    """
    Sellable material with its current per-unit rate.

    The rate is mutable; sales copy it into Transaction.rate_at_sale, so a
    price change never alters past totals. Rows are never hard-deleted.
    """
    __tablename__ = "materials"
    __table_args__ = {"sqlite_autoincrement": True}

    material_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    unit = db.Column(db.String(32), nullable=False, default="ton")
    rate_per_unit = db.Column(db.Numeric(12, 2), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "material_id": self.material_id,
            "name": self.name,
            "unit": self.unit,
            "rate_per_unit": as_number(self.rate_per_unit),
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Owner(db.Model):
    """Vehicle owner: the party a ledger is kept for."""
    __tablename__ = "vehicle_owners"
    __table_args__ = {"sqlite_autoincrement": True}

    owner_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    contact_info = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "name": self.name,
            "contact_info": self.contact_info,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Vehicle(db.Model):
    """
    Recently used vehicle numbers per owner (autocomplete only).

    Never authoritative for billing: bills and transactions carry their own
    normalized vehicle string.
    """
    __tablename__ = "vehicles"
    __table_args__ = (
        db.UniqueConstraint("owner_id", "vehicle_number", name="uq_vehicles_owner_number"),
        db.Index("ix_vehicles_owner_last_used", "owner_id", "last_used_at"),
        {"sqlite_autoincrement": True},
    )

    vehicle_id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("vehicle_owners.owner_id"), nullable=False)
    vehicle_number = db.Column(db.String(32), nullable=False)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    owner = db.relationship("Owner", backref=db.backref("vehicles", lazy=True))

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "owner_id": self.owner_id,
            "vehicle_number": self.vehicle_number,
            "last_used_at": to_utc_z(self.last_used_at),
        }
