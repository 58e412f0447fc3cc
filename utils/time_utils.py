"""
utils/time_utils.py

Purpose: Time helpers

- Current UTC instant
- Millisecond epoch conversions used on the wire
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Returns the current aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def from_epoch_millis(millis: int) -> datetime:
    """
    Converts integer milliseconds since the epoch to an aware UTC datetime.
    """
    seconds, remainder = divmod(int(millis), 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=remainder * 1000)


def to_epoch_millis(dt: datetime) -> int:
    """
    Converts a datetime to integer milliseconds since the epoch.
    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)
