"""
Appointment endpoints.

Veterinarians book, manage and review appointments; pet owners submit
requests that a clinic member approves later.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...schemas import (
    AppointmentAssignConfirm,
    AppointmentCreate,
    AppointmentDetail,
    AppointmentDetailResponse,
    AppointmentListResponse,
    AppointmentManage,
    AppointmentMessageResponse,
    AppointmentRequestCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ManageAction,
    PendingRequestsResponse,
)
from ...services import appointments as appointment_service
from ...utils.config import SchedulingSettings
from ..deps import get_db_session, get_settings, require_owner, require_vet
from ..security import Principal

router = APIRouter(prefix="/appointments", tags=["appointments"])

MANAGE_MESSAGES = {
    ManageAction.APPROVE: "Appointment approved",
    ManageAction.REJECT: "Appointment rejected",
    ManageAction.ASSIGN: "Veterinarian assigned",
}


def _message(message: str, appointment) -> AppointmentMessageResponse:
    return AppointmentMessageResponse(
        message=message, appointment=AppointmentResponse.model_validate(appointment)
    )


@router.post(
    "",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    body: AppointmentCreate,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointment = await appointment_service.create_appointment(
        session,
        principal.id,
        pet_id=body.pet_id,
        start=body.start_date_time,
        end=body.end_date_time,
        clinic_id=body.clinic_id,
        reason=body.reason,
        notes=body.notes,
    )
    return _message("Appointment created successfully", appointment)


@router.post(
    "/request",
    response_model=AppointmentMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_appointment(
    body: AppointmentRequestCreate,
    principal: Principal = Depends(require_owner),
    session: AsyncSession = Depends(get_db_session),
    settings: SchedulingSettings = Depends(get_settings),
):
    appointment = await appointment_service.request_appointment(
        session,
        principal.id,
        pet_id=body.pet_id,
        start=body.start_date_time,
        clinic_id=body.clinic_id,
        vet_id=body.vet_id,
        reason=body.reason,
        duration_minutes=settings.request_duration_minutes,
    )
    return _message("Appointment request submitted", appointment)


@router.get("", response_model=AppointmentListResponse)
async def get_schedule(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    clinic_id: Optional[uuid.UUID] = Query(None, alias="clinicId"),
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointments = await appointment_service.get_schedule(
        session, principal.id, start=start, end=end, clinic_id=clinic_id
    )
    return AppointmentListResponse(
        appointments=[AppointmentDetail.model_validate(a) for a in appointments]
    )


# Declared before /{appointment_id} so "requests" is not parsed as an id
@router.get("/requests", response_model=PendingRequestsResponse)
async def get_pending_requests(
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    requests = await appointment_service.get_pending_requests(session, principal.id)
    return PendingRequestsResponse(
        requests=[AppointmentDetail.model_validate(a) for a in requests]
    )


@router.get("/{appointment_id}", response_model=AppointmentDetailResponse)
async def get_appointment(
    appointment_id: uuid.UUID,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointment = await appointment_service.get_appointment_detail(
        session, principal.id, appointment_id
    )
    return AppointmentDetailResponse(
        appointment=AppointmentDetail.model_validate(appointment)
    )


@router.put("/{appointment_id}/status", response_model=AppointmentMessageResponse)
async def update_status(
    appointment_id: uuid.UUID,
    body: AppointmentStatusUpdate,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointment = await appointment_service.update_status(
        session, principal.id, appointment_id, body.status
    )
    return _message("Appointment status updated", appointment)


@router.post("/{appointment_id}/manage", response_model=AppointmentMessageResponse)
async def manage_appointment(
    appointment_id: uuid.UUID,
    body: AppointmentManage,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointment = await appointment_service.manage_request(
        session,
        principal.id,
        appointment_id,
        body.action,
        target_vet_id=body.vet_id,
    )
    return _message(MANAGE_MESSAGES[body.action], appointment)


@router.post(
    "/{appointment_id}/assign-confirm", response_model=AppointmentMessageResponse
)
async def assign_and_confirm(
    appointment_id: uuid.UUID,
    body: AppointmentAssignConfirm,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    appointment = await appointment_service.assign_and_confirm(
        session,
        principal.id,
        appointment_id,
        target_vet_id=body.vet_id,
        duration_minutes=body.duration_minutes,
    )
    return _message("Appointment assigned and confirmed", appointment)
