"""
Clinic provisioning and staff management.

``ensure_personal_clinic`` gives every booking a clinic context. The
remaining operations manage clinics, memberships and invitations; each one
commits its own unit of work.
"""

import logging
import uuid
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException, ValidationException
from ..models import (
    MANAGER_ROLES,
    Clinic,
    ClinicMember,
    ClinicRole,
    MemberStatus,
    Veterinarian,
)
from ..schemas.clinic import InvitationAction
from .authorization import get_membership, require_active_member, require_clinic_role

logger = logging.getLogger(__name__)


async def get_veterinarian(session: AsyncSession, vet_id: uuid.UUID) -> Veterinarian:
    vet = await session.get(Veterinarian, vet_id)
    if vet is None:
        raise NotFoundException("Veterinarian not found", "veterinarian", vet_id)
    return vet


async def get_clinic(session: AsyncSession, clinic_id: uuid.UUID) -> Clinic:
    clinic = await session.get(Clinic, clinic_id)
    if clinic is None:
        raise NotFoundException("Clinic not found", "clinic", clinic_id)
    return clinic


async def ensure_personal_clinic(session: AsyncSession, vet_id: uuid.UUID) -> Clinic:
    """
    Resolve the clinic a booking without explicit clinic belongs to.

    Returns the clinic of the vet's oldest ACTIVE membership. A vet without
    any active membership gets a personal practice, with an ACTIVE OWNER
    membership, created in the caller's transaction. Calling this again
    returns the same clinic.

    Raises:
        NotFoundException: If the veterinarian does not exist
    """
    vet = await get_veterinarian(session, vet_id)

    stmt = (
        select(Clinic)
        .join(ClinicMember, ClinicMember.clinic_id == Clinic.id)
        .where(
            ClinicMember.veterinarian_id == vet_id,
            ClinicMember.status == MemberStatus.ACTIVE,
        )
        .order_by(ClinicMember.created_at, ClinicMember.id)
        .limit(1)
    )
    clinic = (await session.execute(stmt)).scalars().first()
    if clinic is not None:
        return clinic

    clinic = Clinic.personal_for(vet.display_name, created_by=vet_id)
    session.add(clinic)
    session.add(
        ClinicMember(
            clinic_id=clinic.id,
            veterinarian_id=vet_id,
            role=ClinicRole.OWNER,
            status=MemberStatus.ACTIVE,
            created_by=vet_id,
        )
    )
    await session.flush()

    logger.info(f"Created personal clinic {clinic.id} for vet {vet_id}")
    return clinic


async def create_clinic(
    session: AsyncSession,
    vet_id: uuid.UUID,
    name: str,
    address: Optional[str] = None,
    phone_number: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Clinic:
    """Create a clinic; the creator becomes its active OWNER."""
    await get_veterinarian(session, vet_id)

    clinic = Clinic(
        name=name,
        address=address,
        phone_number=phone_number,
        latitude=latitude,
        longitude=longitude,
        created_by=vet_id,
    )
    session.add(clinic)
    session.add(
        ClinicMember(
            clinic_id=clinic.id,
            veterinarian_id=vet_id,
            role=ClinicRole.OWNER,
            status=MemberStatus.ACTIVE,
            created_by=vet_id,
        )
    )
    await session.commit()

    logger.info(f"Vet {vet_id} created clinic {clinic.id}")
    return clinic


async def get_my_clinics(
    session: AsyncSession, vet_id: uuid.UUID
) -> List[Tuple[Clinic, ClinicMember]]:
    """Clinics where the vet is an active member, paired with the membership."""
    stmt = (
        select(Clinic, ClinicMember)
        .join(ClinicMember, ClinicMember.clinic_id == Clinic.id)
        .where(
            ClinicMember.veterinarian_id == vet_id,
            ClinicMember.status == MemberStatus.ACTIVE,
        )
        .order_by(Clinic.name)
    )
    return [(clinic, member) for clinic, member in (await session.execute(stmt)).all()]


async def update_clinic(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    **changes: Any,
) -> Clinic:
    """Update clinic details. Only owners and admins may do this."""
    clinic = await get_clinic(session, clinic_id)
    await require_clinic_role(session, vet_id, clinic_id, MANAGER_ROLES)

    clinic.update_fields(**{k: v for k, v in changes.items() if v is not None})
    clinic.updated_by = vet_id
    await session.commit()

    logger.info(f"Vet {vet_id} updated clinic {clinic_id}: {sorted(changes)}")
    return clinic


async def get_clinic_staff(
    session: AsyncSession, vet_id: uuid.UUID, clinic_id: uuid.UUID
) -> List[Tuple[ClinicMember, Veterinarian]]:
    """Active members of the clinic; visible to active members only."""
    await get_clinic(session, clinic_id)
    await require_active_member(session, vet_id, clinic_id)

    stmt = (
        select(ClinicMember, Veterinarian)
        .join(Veterinarian, Veterinarian.id == ClinicMember.veterinarian_id)
        .where(
            ClinicMember.clinic_id == clinic_id,
            ClinicMember.status == MemberStatus.ACTIVE,
        )
        .order_by(Veterinarian.last_name, Veterinarian.first_name)
    )
    return [(member, vet) for member, vet in (await session.execute(stmt)).all()]


async def _enroll_member(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    email: str,
    role: ClinicRole,
    status: MemberStatus,
) -> Tuple[ClinicMember, Veterinarian]:
    await get_clinic(session, clinic_id)
    await require_clinic_role(session, vet_id, clinic_id, MANAGER_ROLES)

    if role == ClinicRole.OWNER:
        await require_clinic_role(
            session,
            vet_id,
            clinic_id,
            [ClinicRole.OWNER],
            message="Only clinic owners can grant the OWNER role",
        )

    stmt = select(Veterinarian).where(func.lower(Veterinarian.email) == email.lower())
    target = (await session.execute(stmt)).scalar_one_or_none()
    if target is None:
        raise NotFoundException(
            "Veterinarian not found with that email", "veterinarian", email
        )

    member = await get_membership(session, target.id, clinic_id)
    if member is None:
        member = ClinicMember(
            clinic_id=clinic_id,
            veterinarian_id=target.id,
            role=role,
            status=status,
            created_by=vet_id,
        )
        session.add(member)
    elif member.status == MemberStatus.ACTIVE:
        raise ValidationException(
            "Veterinarian is already a member of this clinic", field="email"
        )
    elif member.status == MemberStatus.INVITED and status == MemberStatus.INVITED:
        raise ValidationException(
            "Veterinarian has already been invited to this clinic", field="email"
        )
    else:
        # Re-enrolling a former or invited member keeps the original row.
        member.role = role
        member.status = status
        member.updated_by = vet_id

    await session.commit()
    return member, target


async def add_member(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    email: str,
    role: ClinicRole = ClinicRole.VET,
) -> Tuple[ClinicMember, Veterinarian]:
    """Add a veterinarian to the clinic as an ACTIVE member."""
    member, target = await _enroll_member(
        session, vet_id, clinic_id, email, role, MemberStatus.ACTIVE
    )
    logger.info(f"Vet {vet_id} added {target.id} to clinic {clinic_id} as {role.value}")
    return member, target


async def invite_member(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    email: str,
    role: ClinicRole = ClinicRole.VET,
) -> Tuple[ClinicMember, Veterinarian]:
    """Invite a veterinarian; the membership stays INVITED until accepted."""
    member, target = await _enroll_member(
        session, vet_id, clinic_id, email, role, MemberStatus.INVITED
    )
    logger.info(f"Vet {vet_id} invited {target.id} to clinic {clinic_id} as {role.value}")
    return member, target


async def get_my_invitations(
    session: AsyncSession, vet_id: uuid.UUID
) -> List[Tuple[ClinicMember, Clinic]]:
    stmt = (
        select(ClinicMember, Clinic)
        .join(Clinic, Clinic.id == ClinicMember.clinic_id)
        .where(
            ClinicMember.veterinarian_id == vet_id,
            ClinicMember.status == MemberStatus.INVITED,
        )
        .order_by(ClinicMember.updated_at.desc())
    )
    return [(member, clinic) for member, clinic in (await session.execute(stmt)).all()]


async def respond_to_invitation(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    action: InvitationAction,
) -> ClinicMember:
    """Accept (ACTIVE) or decline (INACTIVE) a pending invitation."""
    member = await get_membership(session, vet_id, clinic_id)
    if member is None or member.status != MemberStatus.INVITED:
        raise NotFoundException("Invitation not found", "invitation", clinic_id)

    if action == InvitationAction.ACCEPT:
        member.activate()
    else:
        member.deactivate()
    member.updated_by = vet_id
    await session.commit()

    logger.info(f"Vet {vet_id} answered {action.value} to clinic {clinic_id}")
    return member


async def set_availability(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    target_vet_id: uuid.UUID,
    is_available: bool,
) -> ClinicMember:
    """Toggle whether a member takes appointments; self-service or managers."""
    member = await get_membership(session, target_vet_id, clinic_id)
    if member is None or member.status != MemberStatus.ACTIVE:
        raise NotFoundException("Member not found", "clinic_member", target_vet_id)

    if target_vet_id != vet_id:
        await require_clinic_role(session, vet_id, clinic_id, MANAGER_ROLES)

    member.is_available = is_available
    member.updated_by = vet_id
    await session.commit()
    return member
