"""
Timestamp helpers.

All timestamps are persisted as UTC ISO-8601 strings with millisecond
precision, so the store can range-filter them with plain string comparison.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return to_utc(value).isoformat(timespec="milliseconds")


def utcnow_iso() -> str:
    return to_iso(utcnow())


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a stored timestamp back into an aware UTC datetime.

    Accepts ISO strings (with or without a trailing ``Z``) and datetimes.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
