"""
Appointment conflict detection.

A veterinarian cannot hold two live appointments at the same clinic whose
[start, end) intervals intersect. Back-to-back appointments are allowed.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    DatabaseException,
    InvalidRangeException,
    SchedulingConflictException,
)
from ..models import NON_BLOCKING_STATUSES, Appointment, AppointmentStatus
from ..utils.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)


async def has_conflict(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    start: datetime,
    end: datetime,
    exclude_statuses: Iterable[AppointmentStatus] = NON_BLOCKING_STATUSES,
    exclude_appointment_id: Optional[uuid.UUID] = None,
) -> bool:
    """
    Check whether [start, end) overlaps any of the vet's appointments at the clinic.

    Args:
        session: Database session
        vet_id: Veterinarian whose schedule is checked
        clinic_id: Clinic the proposed appointment belongs to
        start: Proposed start (inclusive)
        end: Proposed end (exclusive)
        exclude_statuses: Statuses that do not occupy the vet's time
        exclude_appointment_id: Appointment to ignore, used when moving or
            reassigning an existing appointment

    Returns:
        True if at least one existing appointment overlaps

    Raises:
        InvalidRangeException: If start is not before end
        DatabaseException: If the lookup fails
    """
    start, end = ensure_utc(start), ensure_utc(end)
    if start >= end:
        raise InvalidRangeException(start=start, end=end)

    # Half-open overlap: existing.start < end AND existing.end > start
    stmt = select(Appointment.id).where(
        Appointment.veterinarian_id == vet_id,
        Appointment.clinic_id == clinic_id,
        Appointment.start_at < end,
        Appointment.end_at > start,
    )

    excluded = list(exclude_statuses)
    if excluded:
        stmt = stmt.where(Appointment.status.not_in(excluded))
    if exclude_appointment_id is not None:
        stmt = stmt.where(Appointment.id != exclude_appointment_id)

    try:
        result = await session.execute(stmt.limit(1))
    except SQLAlchemyError as e:
        logger.error(f"Conflict lookup failed for vet {vet_id}: {e}")
        raise DatabaseException(
            "Failed to check appointment conflicts", original_error=e
        )

    return result.first() is not None


async def ensure_no_conflict(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    start: datetime,
    end: datetime,
    exclude_appointment_id: Optional[uuid.UUID] = None,
) -> None:
    """Raise SchedulingConflictException when the proposed range is taken."""
    if await has_conflict(
        session,
        vet_id,
        clinic_id,
        start,
        end,
        exclude_appointment_id=exclude_appointment_id,
    ):
        logger.info(
            f"Rejected overlapping booking for vet {vet_id} at clinic {clinic_id}: "
            f"{start.isoformat()} - {end.isoformat()}"
        )
        raise SchedulingConflictException(vet_id=vet_id, clinic_id=clinic_id)
