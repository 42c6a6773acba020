"""
Available-slot generation for a veterinarian's working day.
"""

import logging
import uuid
from datetime import date, datetime, time
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import InvalidRangeException, ValidationException
from ..models import NON_BLOCKING_STATUSES, Appointment
from ..utils.datetime_utils import (
    day_bounds,
    ensure_utc,
    format_slot,
    get_current_utc,
    intervals_overlap,
    iter_slot_windows,
    to_utc,
)

logger = logging.getLogger(__name__)

DEFAULT_WORK_START = time(9, 0)
DEFAULT_WORK_END = time(18, 0)
DEFAULT_SLOT_MINUTES = 30


async def generate_slots(
    session: AsyncSession,
    vet_id: uuid.UUID,
    day: date,
    work_start: time = DEFAULT_WORK_START,
    work_end: time = DEFAULT_WORK_END,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    now: Optional[datetime] = None,
    timezone: str = "UTC",
) -> List[str]:
    """
    List the free slot start times for a veterinarian on a day.

    The working window [work_start, work_end) is split into contiguous
    ``slot_minutes`` slots in the scheduling timezone. A slot is returned when
    none of the vet's live appointments (any clinic) overlaps it and, for
    today, when it starts strictly after ``now``.

    Args:
        session: Database session
        vet_id: Veterinarian whose day is inspected
        day: Calendar day in the scheduling timezone
        work_start: Start of the working window
        work_end: End of the working window
        slot_minutes: Slot width
        now: Current instant, defaults to the wall clock
        timezone: IANA name of the scheduling timezone

    Returns:
        Slot start times formatted as HH:MM, in chronological order
    """
    if slot_minutes <= 0:
        raise ValidationException(
            "Slot length must be a positive number of minutes",
            field="slotMinutes",
            value=slot_minutes,
        )
    if work_start >= work_end:
        raise InvalidRangeException("Working hours must start before they end")

    window_start, window_end = day_bounds(day, timezone)
    stmt = select(Appointment.start_at, Appointment.end_at).where(
        Appointment.veterinarian_id == vet_id,
        Appointment.status.not_in(list(NON_BLOCKING_STATUSES)),
        Appointment.start_at < window_end,
        Appointment.end_at > window_start,
    )
    busy = [
        (ensure_utc(start), ensure_utc(end))
        for start, end in (await session.execute(stmt)).all()
    ]

    current = ensure_utc(now) if now is not None else get_current_utc()
    is_today = current.astimezone(ZoneInfo(timezone)).date() == day

    slots: List[str] = []
    for slot_start, slot_end in iter_slot_windows(
        day, work_start, work_end, slot_minutes, timezone
    ):
        utc_start, utc_end = to_utc(slot_start), to_utc(slot_end)
        if is_today and utc_start <= current:
            continue
        if any(intervals_overlap(utc_start, utc_end, s, e) for s, e in busy):
            continue
        slots.append(format_slot(slot_start))

    logger.debug(
        f"Vet {vet_id} has {len(slots)} free slots on {day.isoformat()} "
        f"({len(busy)} booked)"
    )
    return slots
