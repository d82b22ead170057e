"""
Time Utilities

Timestamps for response envelopes and process uptime.

Envelope timestamps use the same shape browsers produce with
Date.prototype.toISOString(): UTC, millisecond precision, "Z" suffix
(e.g. "2024-01-01T12:00:00.000Z"), so frontends can parse them directly.
"""

import time
from datetime import datetime, timezone
from typing import Optional


_PROCESS_STARTED = time.monotonic()


def current_utc_datetime() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        datetime: Current time as timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def to_iso_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Args:
        dt: Datetime to format (defaults to now). Naive datetimes are assumed UTC.

    Returns:
        str: Timestamp such as "2024-01-01T12:00:00.000Z"

    Examples:
        >>> to_iso_timestamp(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        '2024-01-01T12:00:00.000Z'
    """
    if dt is None:
        dt = current_utc_datetime()
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def uptime_seconds() -> float:
    """Seconds elapsed since this module was first imported."""
    return time.monotonic() - _PROCESS_STARTED
