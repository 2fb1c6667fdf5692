"""
UTC datetime utilities for consistent timezone handling.

Record timestamps are ISO-8601 strings in UTC; the session expiry marker is
epoch milliseconds. Use these helpers instead of datetime.now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision ('Z' suffix)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_timestamp_ms(dt: datetime) -> int:
    """
    Convert a datetime to Unix epoch milliseconds.

    Naive datetimes are treated as UTC.

    Args:
        dt: Datetime to convert

    Returns:
        Milliseconds since the epoch
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def from_timestamp_ms_utc(timestamp_ms: int | float) -> datetime:
    """
    Create a UTC-aware datetime from Unix epoch milliseconds.

    Args:
        timestamp_ms: Milliseconds since epoch

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
