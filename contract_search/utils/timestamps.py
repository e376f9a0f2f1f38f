"""ISO-8601 timestamp helpers shared by the store and the engine."""

from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime. Returns None if not parseable.

    Naive values are taken as UTC so they compare with the backend's offsets.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso(dt: datetime) -> str:
    """Format a datetime the way the backend stores system timestamps."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat(timespec="milliseconds")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
