"""UTC timestamps and ISO-8601 rendering"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time, timezone-aware UTC"""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (the store keeps naive UTC)"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    """Strip tzinfo after converting to UTC, for DATETIME columns"""
    return as_utc(value).replace(tzinfo=None)


def to_iso(value: Optional[datetime]) -> str:
    """
    ISO-8601 UTC with millisecond precision and a Z suffix

    Example: 2026-10-19T08:30:00.123Z; None renders as an empty string
    """
    if value is None:
        return ""
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
