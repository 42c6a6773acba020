"""
Date and time utilities for appointment scheduling.

All instants are stored and compared in UTC. Working hours are wall-clock
times interpreted in the scheduling timezone.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterator, Tuple
from zoneinfo import ZoneInfo

SLOT_FORMAT = "%H:%M"


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(ZoneInfo("UTC"))


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC value.

    Naive values are taken to already be UTC; SQLite hands timestamps back
    without tzinfo.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(ZoneInfo("UTC"))


def to_utc(dt: datetime, source_tz: str = "UTC") -> datetime:
    """Convert a datetime from the source timezone to UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(source_tz))
    return dt.astimezone(ZoneInfo("UTC"))


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """
    Half-open interval overlap test for [start_a, end_a) and [start_b, end_b).

    Back-to-back intervals (end_a == start_b) do not overlap.
    """
    return start_a < end_b and end_a > start_b


def day_bounds(day: date, timezone: str = "UTC") -> Tuple[datetime, datetime]:
    """Return the UTC instants bounding the calendar day in the given timezone."""
    tz = ZoneInfo(timezone)
    start = datetime.combine(day, time.min, tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tz)
    return to_utc(start), to_utc(end)


def iter_slot_windows(
    day: date,
    work_start: time,
    work_end: time,
    slot_minutes: int,
    timezone: str = "UTC",
) -> Iterator[Tuple[datetime, datetime]]:
    """
    Yield contiguous (start, end) slot windows covering the working hours.

    Windows are aware datetimes in the given timezone; a trailing window that
    would run past ``work_end`` is not produced, so a 09:00-17:10 day with
    30 minute slots ends with 16:30-17:00.
    """
    tz = ZoneInfo(timezone)
    step = timedelta(minutes=slot_minutes)
    current = datetime.combine(day, work_start, tz)
    end_of_day = datetime.combine(day, work_end, tz)

    while current + step <= end_of_day:
        yield current, current + step
        current += step


def format_slot(dt: datetime) -> str:
    """Format a slot start as HH:MM in its own timezone."""
    return dt.strftime(SLOT_FORMAT)
