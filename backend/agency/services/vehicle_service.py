# Overview: Service-layer operations for the vehicle autocomplete registry.

from __future__ import annotations

import re
from datetime import datetime

from ..models import Owner, Vehicle
from ..validation import NotFoundError, ValidationError, check_max_length
from agency.time_utils import utcnow
from .upsert import dialect_insert

_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-{2,}")

SUGGESTION_LIMIT = 5
VEHICLE_NUMBER_MAX_LENGTH = 32


def normalize_vehicle_number(raw: str | None) -> str:
    """'tn 74 -- ab 1234' -> 'TN74-AB1234'."""
    if raw is None:
        return ""
    return _HYPHEN_RUN.sub("-", _WHITESPACE.sub("", str(raw).upper()))


def touch_vehicle(session, *, owner_id: int, vehicle_number: str, used_at: datetime | None = None) -> None:
    """
    Upsert (owner_id, vehicle_number) and stamp last_used_at.

    Does not commit; callers run this inside their own unit of work. Safe to
    call repeatedly for the same pair.
    """
    used_at = used_at or utcnow()
    stmt = dialect_insert(session, Vehicle).values(
        owner_id=owner_id,
        vehicle_number=vehicle_number,
        last_used_at=used_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["owner_id", "vehicle_number"],
        set_={"last_used_at": stmt.excluded.last_used_at},
    )
    session.execute(stmt)


def suggest_vehicles(session, *, owner_id: int, q: str = "", limit: int = SUGGESTION_LIMIT) -> list[Vehicle]:
    """Most recently used vehicles for an owner whose number contains q."""
    query = session.query(Vehicle).filter(Vehicle.owner_id == owner_id)
    needle = normalize_vehicle_number(q)
    if needle:
        query = query.filter(Vehicle.vehicle_number.ilike(f"%{needle}%"))
    return (
        query.order_by(Vehicle.last_used_at.desc(), Vehicle.vehicle_id.desc())
        .limit(limit)
        .all()
    )


def add_vehicle(session, *, owner_id: int, vehicle_number: str) -> Vehicle:
    normalized = normalize_vehicle_number(vehicle_number)
    if not owner_id or not normalized:
        raise ValidationError("owner_id and vehicle_number are required")
    check_max_length(normalized, VEHICLE_NUMBER_MAX_LENGTH, "vehicle_number")
    if session.get(Owner, owner_id) is None:
        raise NotFoundError("Owner not found")

    touch_vehicle(session, owner_id=owner_id, vehicle_number=normalized)
    session.commit()
    return (
        session.query(Vehicle)
        .filter_by(owner_id=owner_id, vehicle_number=normalized)
        .one()
    )


def delete_vehicle(session, vehicle_id: int) -> None:
    vehicle = session.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle not found")
    session.delete(vehicle)
    session.commit()
