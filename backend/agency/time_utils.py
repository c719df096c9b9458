from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_BUSINESS_TIMEZONE = "Asia/Kolkata"


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def business_tz(name: Optional[str] = None) -> ZoneInfo:
    try:
        return ZoneInfo(name or DEFAULT_BUSINESS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Invalid IANA timezone: {name}")


def to_business_date(dt: datetime, tz_name: Optional[str] = None) -> date:
    """Calendar date of a UTC-naive datetime in the business timezone."""
    return dt.replace(tzinfo=timezone.utc).astimezone(business_tz(tz_name)).date()


def business_today(tz_name: Optional[str] = None) -> date:
    return to_business_date(utcnow(), tz_name)


def business_day_bounds(day: date, tz_name: Optional[str] = None) -> tuple[datetime, datetime]:
    """
    UTC-naive [start, end) covering one business calendar day.

    Bounds are half-open so a row stamped exactly at local midnight belongs
    to the day that starts there.
    """
    tz = business_tz(tz_name)
    start_local = datetime.combine(day, time.min, tzinfo=tz)
    end_local = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return (
        start_local.astimezone(timezone.utc).replace(tzinfo=None),
        end_local.astimezone(timezone.utc).replace(tzinfo=None),
    )


def business_range_bounds(
    start_day: date, end_day: date, tz_name: Optional[str] = None
) -> tuple[datetime, datetime]:
    """UTC-naive [start, end) covering an inclusive range of business days."""
    start, _ = business_day_bounds(start_day, tz_name)
    _, end = business_day_bounds(end_day, tz_name)
    return start, end


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """'YYYY-MM-DD' -> date; None / "" -> None. Raises ValueError when malformed."""
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return date.fromisoformat(s)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        # interpret naive as UTC
        return dt.replace(tzinfo=None)

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_business_moment(value: Optional[str], tz_name: Optional[str] = None) -> Optional[datetime]:
    """
    Accept either a bare date or a full datetime.

    A bare 'YYYY-MM-DD' means local midnight in the business timezone; anything
    longer goes through parse_iso_datetime.
    """
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if len(s) == 10:
        start, _ = business_day_bounds(date.fromisoformat(s), tz_name)
        return start
    return parse_iso_datetime(s)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")
