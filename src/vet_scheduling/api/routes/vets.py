"""
Veterinarian availability endpoints.
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...exceptions import ValidationException
from ...schemas import SlotsResponse
from ...services import generate_slots, get_veterinarian
from ...utils.config import SchedulingSettings
from ..deps import get_db_session, get_settings, require_owner_or_vet
from ..security import Principal

router = APIRouter(prefix="/vets", tags=["vets"])


@router.get("/{vet_id}/slots", response_model=SlotsResponse)
async def get_available_slots(
    vet_id: uuid.UUID,
    day: Optional[date] = Query(None, alias="date"),
    principal: Principal = Depends(require_owner_or_vet),
    session: AsyncSession = Depends(get_db_session),
    settings: SchedulingSettings = Depends(get_settings),
):
    """Free ``HH:MM`` slot starts for the vet on ``date`` (YYYY-MM-DD)."""
    if day is None:
        raise ValidationException("date query parameter is required", field="date")

    await get_veterinarian(session, vet_id)
    slots = await generate_slots(
        session,
        vet_id,
        day,
        work_start=settings.workday_start,
        work_end=settings.workday_end,
        slot_minutes=settings.slot_minutes,
        timezone=settings.timezone,
    )
    return SlotsResponse(slots=slots)
