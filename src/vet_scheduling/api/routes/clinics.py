"""
Clinic, staff and invitation endpoints. All of them are for veterinarians.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...schemas import (
    AvailabilityUpdate,
    ClinicCreate,
    ClinicListResponse,
    ClinicMessageResponse,
    ClinicResponse,
    ClinicUpdate,
    InvitationAction,
    InvitationListResponse,
    InvitationRespond,
    InvitationResponse,
    MemberAdd,
    MemberMessageResponse,
    MyClinicResponse,
    StaffListResponse,
    StaffMemberResponse,
)
from ...services import clinics as clinic_service
from ..deps import get_db_session, require_vet
from ..security import Principal

router = APIRouter(prefix="/clinics", tags=["clinics"])


@router.post(
    "", response_model=ClinicMessageResponse, status_code=status.HTTP_201_CREATED
)
async def create_clinic(
    body: ClinicCreate,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    clinic = await clinic_service.create_clinic(
        session,
        principal.id,
        name=body.name,
        address=body.address,
        phone_number=body.phone_number,
        latitude=body.latitude,
        longitude=body.longitude,
    )
    return ClinicMessageResponse(
        message="Clinic created successfully",
        clinic=ClinicResponse.model_validate(clinic),
    )


@router.get("/my", response_model=ClinicListResponse)
async def get_my_clinics(
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    rows = await clinic_service.get_my_clinics(session, principal.id)
    return ClinicListResponse(
        clinics=[MyClinicResponse.from_membership(c, m) for c, m in rows]
    )


@router.get("/invitations", response_model=InvitationListResponse)
async def get_my_invitations(
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    rows = await clinic_service.get_my_invitations(session, principal.id)
    return InvitationListResponse(
        invitations=[InvitationResponse.from_member(m, c) for m, c in rows]
    )


@router.put("/{clinic_id}", response_model=ClinicMessageResponse)
async def update_clinic(
    clinic_id: uuid.UUID,
    body: ClinicUpdate,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    clinic = await clinic_service.update_clinic(
        session, principal.id, clinic_id, **body.model_dump(exclude_unset=True)
    )
    return ClinicMessageResponse(
        message="Clinic updated successfully",
        clinic=ClinicResponse.model_validate(clinic),
    )


@router.get("/{clinic_id}/staff", response_model=StaffListResponse)
async def get_clinic_staff(
    clinic_id: uuid.UUID,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    rows = await clinic_service.get_clinic_staff(session, principal.id, clinic_id)
    return StaffListResponse(
        staff=[StaffMemberResponse.from_member(m, v) for m, v in rows]
    )


@router.post(
    "/{clinic_id}/staff",
    response_model=MemberMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_staff_member(
    clinic_id: uuid.UUID,
    body: MemberAdd,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    member, vet = await clinic_service.add_member(
        session, principal.id, clinic_id, body.email, role=body.role
    )
    return MemberMessageResponse(
        message="Member added successfully",
        member=StaffMemberResponse.from_member(member, vet),
    )


@router.post(
    "/{clinic_id}/invitations",
    response_model=MemberMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_staff_member(
    clinic_id: uuid.UUID,
    body: MemberAdd,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    member, vet = await clinic_service.invite_member(
        session, principal.id, clinic_id, body.email, role=body.role
    )
    return MemberMessageResponse(
        message="Invitation sent",
        member=StaffMemberResponse.from_member(member, vet),
    )


@router.post("/{clinic_id}/invitation", response_model=MemberMessageResponse)
async def respond_to_invitation(
    clinic_id: uuid.UUID,
    body: InvitationRespond,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    member = await clinic_service.respond_to_invitation(
        session, principal.id, clinic_id, body.action
    )
    vet = await clinic_service.get_veterinarian(session, principal.id)
    message = (
        "Invitation accepted"
        if body.action == InvitationAction.ACCEPT
        else "Invitation rejected"
    )
    return MemberMessageResponse(
        message=message, member=StaffMemberResponse.from_member(member, vet)
    )


@router.put("/{clinic_id}/availability", response_model=MemberMessageResponse)
async def set_availability(
    clinic_id: uuid.UUID,
    body: AvailabilityUpdate,
    principal: Principal = Depends(require_vet),
    session: AsyncSession = Depends(get_db_session),
):
    member = await clinic_service.set_availability(
        session, principal.id, clinic_id, body.vet_id, body.is_available
    )
    vet = await clinic_service.get_veterinarian(session, body.vet_id)
    return MemberMessageResponse(
        message="Availability updated",
        member=StaffMemberResponse.from_member(member, vet),
    )
