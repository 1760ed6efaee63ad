from __future__ import annotations

from datetime import datetime, time
from typing import Optional


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_hhmm(value: str) -> time:
    """Parse "HH:MM" (seconds optional) into a time of day."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    return time(hour=int(parts[0]), minute=int(parts[1]))


def minutes_since_midnight(value: datetime | time) -> int:
    """Hour and minute of ``value`` as whole minutes; seconds are ignored."""
    return value.hour * 60 + value.minute


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def round_hours(hours: float) -> float:
    return round(hours, 2)


def format_clock(value: Optional[datetime]) -> str:
    return value.strftime("%I:%M:%S %p") if value else "-"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
