"""
Timezone utilities for bucketing attendance into calendar days.

All timestamps are stored in UTC; the calendar day a record belongs to is
computed in one configured IANA zone.
"""

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: datetime, default_tz: Optional[str] = None) -> datetime:
    """
    Ensure a datetime is timezone-aware, defaulting to UTC if naive.

    SQLite hands datetimes back without tzinfo, so values read from the
    database go through here before being compared with ``utc_now()``.
    """
    if dt.tzinfo is None:
        if default_tz:
            return dt.replace(tzinfo=ZoneInfo(default_tz))
        return dt.replace(tzinfo=timezone.utc)
    return dt


def from_utc_to_local(utc_dt: datetime, tz: str) -> datetime:
    """
    Convert UTC datetime to local datetime in the specified timezone.

    Args:
        utc_dt: UTC datetime (naive values are taken as UTC)
        tz: IANA timezone string (e.g., 'UTC', 'America/New_York')

    Returns:
        datetime: Local datetime in the specified timezone
    """
    return ensure_timezone_aware(utc_dt).astimezone(ZoneInfo(tz))


def local_date(utc_dt: datetime, tz: str) -> date:
    """Calendar date of an instant as seen in ``tz``."""
    return from_utc_to_local(utc_dt, tz).date()


def validate_timezone(tz: str) -> bool:
    """Return True if ``tz`` is a known IANA timezone."""
    try:
        ZoneInfo(tz)
        return True
    except (ZoneInfoNotFoundError, ValueError):
        return False


def format_utc_datetime(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime as an ISO 8601 string with a 'Z' suffix.

    Naive values are assumed to be UTC; aware values are converted to UTC.
    """
    if dt is None:
        return None

    iso_string = ensure_timezone_aware(dt).astimezone(timezone.utc).isoformat()
    if iso_string.endswith("+00:00"):
        return iso_string[: -len("+00:00")] + "Z"
    return iso_string
