from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import DeclarativeMeta


# Upper bound for a per-unit rate; keeps Numeric(12, 2) from overflowing
MAX_RATE = Decimal("9999999.99")

# Stored precision: quantities Numeric(.,3), money Numeric(.,2)
QUANTITY_PLACES = 3
MONEY_PLACES = 2
CENT = Decimal("0.01")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate material name)."""


class NotFoundError(LookupError):
    """404-level reference to a missing owner/material/bill/vehicle/transaction."""


class TransactionAbortError(RuntimeError):
    """A multi-statement write failed and was rolled back as a unit."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Coerce JSON input (int, float, numeric string) to Decimal.

    Booleans, blanks, NaN and infinities are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, (int, float)):
        dec = Decimal(str(value))
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be a number")
        try:
            dec = Decimal(stripped)
        except InvalidOperation:
            raise ValidationError(f"{field} must be a number")
    else:
        raise ValidationError(f"{field} must be a number")

    if not dec.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return dec


def to_positive_decimal(value: Any, field: str, *, places: int | None = None) -> Decimal:
    dec = to_decimal(value, field)
    if places is not None:
        check_places(dec, places, field)
    if dec <= 0:
        raise ValidationError(f"{field} must be > 0")
    return dec


def check_places(dec: Decimal, places: int, field: str) -> Decimal:
    """Reject values the Numeric(., places) column would silently round."""
    try:
        exact = dec == dec.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        raise ValidationError(f"{field} is out of range")
    if not exact:
        raise ValidationError(f"{field} allows at most {places} decimal places")
    return dec


def to_money(value: Decimal) -> Decimal:
    """Round a computed amount to cents (half up), the precision amounts are stored at."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def check_max_length(value: str | None, limit: int, field: str) -> None:
    if value is not None and len(value) > limit:
        raise ValidationError(f"{field} exceeds max length {limit}")


def as_number(value: Decimal | int | float | None) -> float | int | None:
    """JSON-friendly number: integral values stay ints, the rest become floats."""
    if value is None:
        return None
    dec = Decimal(value) if not isinstance(value, Decimal) else value
    if dec == dec.to_integral_value():
        return int(dec)
    return float(dec)


def to_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValidationError(f"{key} must be a boolean")


def to_flag(value: Any, key: str) -> bool:
    """Optional boolean; absent or null means False."""
    return False if value is None else to_bool(value, key)


def _coerce_text(value: Any, key: str) -> str:
    if isinstance(value, (dict, list)):
        raise ValidationError(f"{key} must be text")
    return str(value).strip()


_COERCERS = (
    (Numeric, to_decimal),
    (Boolean, to_bool),
    (String, _coerce_text),
)


def _coerce(column, value: Any):
    for coltype, coerce in _COERCERS:
        if isinstance(column.type, coltype):
            return coerce(value, column.key)
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Clean a JSON body against the model's columns and a policy allowlist.

    Keys outside policy.writable_fields are dropped silently: the admin pages
    post whole row objects (ids, timestamps) back on update. With
    partial=False every required_on_create field must be present and
    non-blank.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in (policy.required_on_create or ()) if payload.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}
    patch: dict = {}
    for key in policy.writable_fields & payload.keys():
        column = columns.get(key)
        if column is None:
            continue

        value = payload[key]
        if value is None:
            if not column.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[key] = None
            continue

        value = _coerce(column, value)
        if isinstance(value, str):
            if value == "" and not column.nullable:
                raise ValidationError(f"{key} cannot be blank")
            limit = getattr(column.type, "length", None)
            if limit and len(value) > limit:
                raise ValidationError(f"{key} exceeds max length {limit}")
        patch[key] = value

    return patch


def enforce_rules_material(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "rate_per_unit" in patch and patch["rate_per_unit"] is not None:
        rate = patch["rate_per_unit"]
        if rate < 0:
            raise ValidationError("rate_per_unit must be >= 0")
        if rate > MAX_RATE:
            raise ValidationError(f"rate_per_unit cannot exceed {MAX_RATE}")
        check_places(rate, MONEY_PLACES, "rate_per_unit")
