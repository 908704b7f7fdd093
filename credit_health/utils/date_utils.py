"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a naive UTC datetime (matches stored timestamps)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize aware datetimes to naive UTC; naive values are assumed UTC"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def trailing_window_start(now: datetime, days: int) -> datetime:
    """Start of a trailing window of whole 24h days ending at now"""
    return to_naive_utc(now) - timedelta(days=days)
