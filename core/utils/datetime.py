"""Datetime utilities for common operations."""

from datetime import datetime, timezone
from typing import Callable, Optional


Clock = Callable[[], datetime]


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(datetime_str: str) -> Optional[datetime]:
    """
    Parse datetime string in ISO-8601 or a few common date formats.

    Args:
        datetime_str: Datetime string to parse

    Returns:
        Parsed UTC datetime or None if invalid
    """
    if not isinstance(datetime_str, str):
        return None

    candidate = datetime_str.strip()
    if not candidate:
        return None

    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(candidate))
    except ValueError:
        pass

    formats = [
        "%Y/%m/%d",
        "%m/%d/%Y",
        "%Y/%m/%d %H:%M:%S",
        "%m/%d/%Y %H:%M:%S",
    ]

    for fmt in formats:
        try:
            return ensure_utc(datetime.strptime(candidate, fmt))
        except ValueError:
            continue

    return None


def to_iso_instant(value: datetime) -> str:
    """Render a datetime as a millisecond-precision UTC instant, e.g. 2025-01-31T00:00:00.000Z."""
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
