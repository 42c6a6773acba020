"""
Appointment booking and request workflow.

Bookings take a row lock on the veterinarian before the conflict check, so
two concurrent bookings for the same vet run one after the other inside
their own transactions. On PostgreSQL an exclusion constraint backs this up;
a violation of it is reported as a scheduling conflict.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..exceptions import (
    AuthorizationException,
    BusinessRuleException,
    InvalidRangeException,
    NotFoundException,
    SchedulingConflictException,
    TransactionException,
    ValidationException,
)
from ..models import (
    MANAGER_ROLES,
    Appointment,
    AppointmentStatus,
    ClinicMember,
    MemberStatus,
    Pet,
    Veterinarian,
)
from ..schemas.appointment import ManageAction
from ..utils.datetime_utils import ensure_utc
from .authorization import (
    get_membership,
    has_clinic_role,
    is_active_member,
    require_active_member,
    require_clinic_role,
)
from .clinics import ensure_personal_clinic, get_clinic
from .conflicts import ensure_no_conflict
from .lifecycle import apply_transition, validate_transition

logger = logging.getLogger(__name__)

DURATION_OPTIONS = (30, 60, 90, 120)
DEFAULT_REQUEST_DURATION_MINUTES = 30
OVERLAP_CONSTRAINT_NAME = "ex_appointments_no_overlap"


async def _lock_veterinarian(session: AsyncSession, vet_id: uuid.UUID) -> Veterinarian:
    """Load the vet with SELECT ... FOR UPDATE; serializes bookings per vet."""
    stmt = select(Veterinarian).where(Veterinarian.id == vet_id).with_for_update()
    vet = (await session.execute(stmt)).scalar_one_or_none()
    if vet is None:
        raise NotFoundException("Veterinarian not found", "veterinarian", vet_id)
    return vet


async def _get_pet(session: AsyncSession, pet_id: uuid.UUID) -> Pet:
    pet = await session.get(Pet, pet_id)
    if pet is None:
        raise NotFoundException("Pet not found", "pet", pet_id)
    return pet


async def _get_appointment(
    session: AsyncSession,
    appointment_id: uuid.UUID,
    with_details: bool = False,
    for_update: bool = False,
) -> Appointment:
    """
    Load an appointment by id.

    With ``for_update`` the row is locked and re-read from the database even
    when the session already holds it, so status checks see committed state.
    """
    stmt = select(Appointment).where(Appointment.id == appointment_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    if with_details:
        stmt = stmt.options(
            selectinload(Appointment.pet), selectinload(Appointment.clinic)
        )
    appointment = (await session.execute(stmt)).scalar_one_or_none()
    if appointment is None:
        raise NotFoundException("Appointment not found", "appointment", appointment_id)
    return appointment


async def _require_assignable_vet(
    session: AsyncSession, vet_id: uuid.UUID, clinic_id: uuid.UUID
) -> None:
    member = await get_membership(session, vet_id, clinic_id)
    if member is None or not member.is_active:
        raise ValidationException(
            "Veterinarian is not an active member of this clinic",
            field="vetId",
            value=vet_id,
        )
    if not member.is_available:
        raise ValidationException(
            "Veterinarian is not taking appointments at this clinic",
            field="vetId",
            value=vet_id,
        )


async def _commit_changes(
    session: AsyncSession, appointment: Appointment, operation: str
) -> None:
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        if OVERLAP_CONSTRAINT_NAME in str(e.orig):
            raise SchedulingConflictException(
                vet_id=appointment.veterinarian_id, clinic_id=appointment.clinic_id
            )
        logger.error(f"Commit failed during {operation}: {e}")
        raise TransactionException(operation=operation, original_error=e)


async def create_appointment(
    session: AsyncSession,
    vet_id: uuid.UUID,
    pet_id: uuid.UUID,
    start: datetime,
    end: datetime,
    clinic_id: Optional[uuid.UUID] = None,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
) -> Appointment:
    """
    Book a CONFIRMED appointment directly into the vet's own schedule.

    Without ``clinic_id`` the appointment goes to the vet's first active
    clinic, or to a personal clinic provisioned on the spot.

    Raises:
        InvalidRangeException: If start is not before end
        NotFoundException: For an unknown pet, clinic or veterinarian
        AuthorizationException: If the vet is not an active member of the clinic
        SchedulingConflictException: If the range overlaps a live appointment
    """
    start, end = ensure_utc(start), ensure_utc(end)
    if start >= end:
        raise InvalidRangeException(start=start, end=end)

    await _get_pet(session, pet_id)
    await _lock_veterinarian(session, vet_id)

    if clinic_id is not None:
        clinic = await get_clinic(session, clinic_id)
        await require_active_member(session, vet_id, clinic.id)
    else:
        clinic = await ensure_personal_clinic(session, vet_id)

    await ensure_no_conflict(session, vet_id, clinic.id, start, end)

    appointment = Appointment(
        clinic_id=clinic.id,
        veterinarian_id=vet_id,
        pet_id=pet_id,
        start_at=start,
        end_at=end,
        reason=reason,
        notes=notes,
        status=AppointmentStatus.CONFIRMED,
        created_by=vet_id,
    )
    session.add(appointment)
    await _commit_changes(session, appointment, "create_appointment")

    logger.info(
        f"Vet {vet_id} booked appointment {appointment.id} at clinic {clinic.id}"
    )
    return appointment


async def request_appointment(
    session: AsyncSession,
    user_id: uuid.UUID,
    pet_id: uuid.UUID,
    start: datetime,
    clinic_id: Optional[uuid.UUID] = None,
    vet_id: Optional[uuid.UUID] = None,
    reason: Optional[str] = None,
    duration_minutes: int = DEFAULT_REQUEST_DURATION_MINUTES,
) -> Appointment:
    """
    Record a PENDING_APPROVAL request from a pet owner.

    A vet without a clinic gets a personal clinic, exactly as for direct
    bookings. When a vet is named the slot is conflict-checked.
    """
    if clinic_id is None and vet_id is None:
        raise ValidationException("Either clinicId or vetId is required")

    pet = await _get_pet(session, pet_id)
    if not pet.is_owned_by(user_id):
        raise AuthorizationException(
            "Not authorized to request appointments for this pet"
        )

    start = ensure_utc(start)
    end = start + timedelta(minutes=duration_minutes)

    if vet_id is not None:
        await _lock_veterinarian(session, vet_id)

    if clinic_id is not None:
        clinic = await get_clinic(session, clinic_id)
        if vet_id is not None:
            await _require_assignable_vet(session, vet_id, clinic.id)
    else:
        clinic = await ensure_personal_clinic(session, vet_id)

    if vet_id is not None:
        await ensure_no_conflict(session, vet_id, clinic.id, start, end)

    appointment = Appointment(
        clinic_id=clinic.id,
        veterinarian_id=vet_id,
        pet_id=pet_id,
        start_at=start,
        end_at=end,
        reason=reason,
        status=AppointmentStatus.PENDING_APPROVAL,
        created_by=user_id,
    )
    session.add(appointment)
    await _commit_changes(session, appointment, "request_appointment")

    logger.info(
        f"Owner {user_id} requested appointment {appointment.id} at clinic {clinic.id}"
    )
    return appointment


async def get_schedule(
    session: AsyncSession,
    vet_id: uuid.UUID,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    clinic_id: Optional[uuid.UUID] = None,
) -> List[Appointment]:
    """The vet's appointments ordered by start, optionally bounded and per clinic."""
    stmt = (
        select(Appointment)
        .options(selectinload(Appointment.pet), selectinload(Appointment.clinic))
        .where(Appointment.veterinarian_id == vet_id)
        .order_by(Appointment.start_at)
    )
    if clinic_id is not None:
        stmt = stmt.where(Appointment.clinic_id == clinic_id)
    if start is not None:
        stmt = stmt.where(Appointment.start_at >= ensure_utc(start))
    if end is not None:
        stmt = stmt.where(Appointment.start_at <= ensure_utc(end))

    return list((await session.execute(stmt)).scalars().all())


async def get_pending_requests(
    session: AsyncSession, vet_id: uuid.UUID
) -> List[Appointment]:
    """Pending requests in the vet's active clinics or addressed to the vet."""
    active_clinics = select(ClinicMember.clinic_id).where(
        ClinicMember.veterinarian_id == vet_id,
        ClinicMember.status == MemberStatus.ACTIVE,
    )
    stmt = (
        select(Appointment)
        .options(selectinload(Appointment.pet), selectinload(Appointment.clinic))
        .where(
            Appointment.status == AppointmentStatus.PENDING_APPROVAL,
            or_(
                Appointment.clinic_id.in_(active_clinics),
                Appointment.veterinarian_id == vet_id,
            ),
        )
        .order_by(Appointment.start_at)
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_appointment_detail(
    session: AsyncSession, vet_id: uuid.UUID, appointment_id: uuid.UUID
) -> Appointment:
    appointment = await _get_appointment(session, appointment_id, with_details=True)
    if appointment.veterinarian_id != vet_id and not await is_active_member(
        session, vet_id, appointment.clinic_id
    ):
        raise AuthorizationException("Not authorized to view this appointment")
    return appointment


async def update_status(
    session: AsyncSession,
    vet_id: uuid.UUID,
    appointment_id: uuid.UUID,
    status: AppointmentStatus,
) -> Appointment:
    """
    Change an appointment's status along a lifecycle edge.

    Allowed for the assigned vet and for clinic owners and admins.
    """
    appointment = await _get_appointment(session, appointment_id, for_update=True)

    if appointment.veterinarian_id != vet_id and not await has_clinic_role(
        session, vet_id, appointment.clinic_id, MANAGER_ROLES
    ):
        raise AuthorizationException("Not authorized to update this appointment")

    if status == AppointmentStatus.CONFIRMED and appointment.veterinarian_id is None:
        raise BusinessRuleException(
            "Assign a veterinarian before confirming this appointment",
            rule_name="confirmed_requires_vet",
        )

    apply_transition(appointment, status, actor_id=vet_id)
    await _commit_changes(session, appointment, "update_status")
    return appointment


async def manage_request(
    session: AsyncSession,
    vet_id: uuid.UUID,
    appointment_id: uuid.UUID,
    action: ManageAction,
    target_vet_id: Optional[uuid.UUID] = None,
) -> Appointment:
    """
    Approve, reject or reassign an appointment.

    APPROVE and REJECT need an active membership in the appointment's clinic;
    APPROVE assigns the approving vet when nobody is assigned yet. ASSIGN
    needs the OWNER or ADMIN role and an active, available target vet. Only
    PENDING_APPROVAL requests can be approved or rejected.
    """
    appointment = await _get_appointment(session, appointment_id, for_update=True)
    clinic_id = appointment.clinic_id

    if action == ManageAction.APPROVE:
        await require_active_member(session, vet_id, clinic_id)
        validate_transition(appointment.status, AppointmentStatus.CONFIRMED)

        assigned_vet_id = appointment.veterinarian_id or vet_id
        await _require_assignable_vet(session, assigned_vet_id, clinic_id)
        await _lock_veterinarian(session, assigned_vet_id)
        await ensure_no_conflict(
            session,
            assigned_vet_id,
            clinic_id,
            appointment.start_at,
            appointment.end_at,
            exclude_appointment_id=appointment.id,
        )
        appointment.veterinarian_id = assigned_vet_id
        apply_transition(appointment, AppointmentStatus.CONFIRMED, actor_id=vet_id)

    elif action == ManageAction.REJECT:
        await require_active_member(session, vet_id, clinic_id)
        validate_transition(appointment.status, AppointmentStatus.CANCELLED)
        if appointment.status != AppointmentStatus.PENDING_APPROVAL:
            raise BusinessRuleException(
                f"Cannot reject an appointment with status {appointment.status.value}",
                rule_name="reject_requires_pending_request",
            )
        apply_transition(appointment, AppointmentStatus.CANCELLED, actor_id=vet_id)

    elif action == ManageAction.ASSIGN:
        await require_clinic_role(session, vet_id, clinic_id, MANAGER_ROLES)
        if target_vet_id is None:
            raise ValidationException("vetId is required for ASSIGN", field="vetId")
        if appointment.is_terminal:
            raise BusinessRuleException(
                f"Cannot reassign an appointment with status {appointment.status.value}",
                rule_name="assign_requires_open_appointment",
            )

        await _require_assignable_vet(session, target_vet_id, clinic_id)
        await _lock_veterinarian(session, target_vet_id)
        await ensure_no_conflict(
            session,
            target_vet_id,
            clinic_id,
            appointment.start_at,
            appointment.end_at,
            exclude_appointment_id=appointment.id,
        )
        appointment.veterinarian_id = target_vet_id
        appointment.updated_by = vet_id

    else:
        raise ValidationException(f"Unknown action: {action}", field="action")

    await _commit_changes(session, appointment, "manage_request")
    logger.info(f"Vet {vet_id} applied {action.value} to appointment {appointment.id}")
    return appointment


async def assign_and_confirm(
    session: AsyncSession,
    vet_id: uuid.UUID,
    appointment_id: uuid.UUID,
    target_vet_id: uuid.UUID,
    duration_minutes: int,
) -> Appointment:
    """
    Assign a vet, set the visit length and confirm a pending request at once.

    Only clinic owners and admins may do this.
    """
    if duration_minutes not in DURATION_OPTIONS:
        raise ValidationException(
            f"durationMinutes must be one of: {', '.join(map(str, DURATION_OPTIONS))}",
            field="durationMinutes",
            value=duration_minutes,
        )

    appointment = await _get_appointment(session, appointment_id, for_update=True)
    clinic_id = appointment.clinic_id

    await require_clinic_role(session, vet_id, clinic_id, MANAGER_ROLES)
    validate_transition(appointment.status, AppointmentStatus.CONFIRMED)
    await _require_assignable_vet(session, target_vet_id, clinic_id)

    start = ensure_utc(appointment.start_at)
    end = start + timedelta(minutes=duration_minutes)

    await _lock_veterinarian(session, target_vet_id)
    await ensure_no_conflict(
        session,
        target_vet_id,
        clinic_id,
        start,
        end,
        exclude_appointment_id=appointment.id,
    )

    appointment.veterinarian_id = target_vet_id
    appointment.end_at = end
    apply_transition(appointment, AppointmentStatus.CONFIRMED, actor_id=vet_id)
    await _commit_changes(session, appointment, "assign_and_confirm")

    logger.info(
        f"Vet {vet_id} assigned {target_vet_id} to appointment {appointment.id} "
        f"for {duration_minutes} minutes"
    )
    return appointment
