"""Datetime utilities for common operations."""

from datetime import datetime, date, time, timedelta, timezone
from typing import Optional


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC (SQLite hands them back
    without tzinfo).
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_day(dt: datetime | date) -> datetime:
    """
    Get start of the UTC day (00:00:00) containing dt.

    Args:
        dt: Date or datetime

    Returns:
        Aware datetime at UTC midnight
    """
    if isinstance(dt, date) and not isinstance(dt, datetime):
        return datetime.combine(dt, time.min, tzinfo=timezone.utc)

    return ensure_utc(dt).replace(hour=0, minute=0, second=0, microsecond=0)


def day_bounds(dt: datetime | date) -> tuple[datetime, datetime]:
    """Half-open [start, end) range covering the UTC day of dt."""
    start = start_of_day(dt)
    return start, start + timedelta(days=1)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime string.

    Empty strings and None yield None; a trailing "Z" is accepted.

    Raises:
        ValueError: If the string is not ISO 8601
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return ensure_utc(parsed)
