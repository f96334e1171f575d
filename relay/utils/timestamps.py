"""UTC timestamp helpers used for document bookkeeping."""

from datetime import datetime, timezone
from typing import Optional

_STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt in UTC; naive datetimes are treated as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_for_storage(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as a fixed-width ISO 8601 string with a Z suffix.

    Example:
        >>> format_for_storage(datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc))
        '2025-11-04T10:30:00.000000Z'
    """
    if dt is None:
        return None
    return ensure_utc(dt).strftime(_STORAGE_FORMAT)


def parse_from_storage(value: Optional[str]) -> Optional[datetime]:
    """Parse a string written by format_for_storage (tolerates a missing fraction)."""
    if not value:
        return None

    stripped = value.rstrip("Z")
    try:
        dt = datetime.strptime(stripped, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(stripped, "%Y-%m-%dT%H:%M:%S")
    return dt.replace(tzinfo=timezone.utc)
