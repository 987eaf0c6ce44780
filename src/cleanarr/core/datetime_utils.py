"""UTC datetime utilities.

Every timestamp handled by Cleanarr is a timezone-aware UTC datetime in
memory and an ISO-8601 string in the database.
"""

from __future__ import annotations

from datetime import datetime, timezone

# Sentinel for unparseable dates. Compares lower than any real timestamp.
MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_timestamp(timestamp: str) -> datetime:
    """Parse ISO-8601 timestamp, handling both Z and +00:00 suffixes.

    Date-only values ("2024-12-18") are accepted and mean midnight UTC.
    Naive timestamps are assumed to be UTC; offsets are converted to UTC.

    Args:
        timestamp: ISO-8601 timestamp string.

    Returns:
        Timezone-aware UTC datetime.

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp or
            falls outside the representable range once converted to UTC.
    """
    normalized = timestamp.strip().replace("Z", "+00:00")
    dt = datetime.fromisoformat(normalized)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range in UTC: {timestamp}") from e


def parse_optional_timestamp(value: str | None) -> datetime | None:
    """Parse a nullable ISO-8601 value, returning None for empty or invalid input."""
    if not value:
        return None
    try:
        return parse_iso_timestamp(value)
    except (ValueError, OverflowError):
        return None


def to_iso(value: datetime | None) -> str | None:
    """Format a datetime as ISO-8601 UTC, passing None through."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def from_unix_timestamp(seconds: int | float) -> datetime:
    """Convert seconds since the epoch to a UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
