"""
Helper Functions
================

Common utility functions used across the application.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional
from zoneinfo import ZoneInfo

from lifeos.config import settings


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Current time in USER_TIMEZONE, or UTC when it is not set."""
    if settings.USER_TIMEZONE:
        return datetime.now(ZoneInfo(settings.USER_TIMEZONE))
    return utc_now()


def local_today() -> date:
    """Calendar date used for "today" in streaks and check-ins."""
    return local_now().date()


def local_at(day: date, clock: time) -> datetime:
    """Wall-clock ``clock`` on ``day`` in USER_TIMEZONE (UTC when unset)."""
    tz = ZoneInfo(settings.USER_TIMEZONE) if settings.USER_TIMEZONE else timezone.utc
    return datetime.combine(day, clock.replace(tzinfo=None), tzinfo=tz)


def local_midnight(day: date) -> datetime:
    """Start of ``day`` in USER_TIMEZONE (UTC when unset), for created_at filters."""
    return local_at(day, time.min)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Accept a datetime, a date, or an ISO 8601 string.

    Naive values are treated as UTC. Returns None for missing or
    unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(value: Any) -> Optional[date]:
    """Like ``parse_datetime`` but returns the calendar date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and len(value) == 10:
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    dt = parse_datetime(value)
    return as_local(dt).date() if dt else None


def as_local(dt: datetime) -> datetime:
    """Convert an aware datetime to USER_TIMEZONE (no-op when unset)."""
    if settings.USER_TIMEZONE:
        return dt.astimezone(ZoneInfo(settings.USER_TIMEZONE))
    return dt


# =============================================================================
# Row access
# =============================================================================
# Rows may be ORM objects or plain mappings (Supabase REST style).

def row_get(row: Any, key: str, default: Any = None) -> Any:
    if isinstance(row, Mapping):
        return row.get(key, default)
    return getattr(row, key, default)


def row_status(row: Any) -> Optional[str]:
    """Status as a plain string, whether stored as an Enum or text."""
    value = row_get(row, "status")
    return getattr(value, "value", value)


def is_completed(row: Any) -> bool:
    return row_status(row) == "completed"


def is_pending(row: Any) -> bool:
    return row_status(row) == "pending"


def row_amount(row: Any) -> float:
    """Numeric ``amount`` as a float; missing or malformed amounts count as 0."""
    value = row_get(row, "amount", 0)
    if value is None:
        return 0.0
    if isinstance(value, Decimal):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def local_datetime(value: Any) -> Optional[datetime]:
    """``parse_datetime`` converted to USER_TIMEZONE."""
    dt = parse_datetime(value)
    return as_local(dt) if dt else None
