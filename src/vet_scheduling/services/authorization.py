"""
Clinic-scoped authorization.

Every check reads the membership row afresh; nothing is cached between
requests.
"""

import uuid
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthorizationException
from ..models import ClinicMember, ClinicRole, MemberStatus


async def get_membership(
    session: AsyncSession, vet_id: uuid.UUID, clinic_id: uuid.UUID
) -> Optional[ClinicMember]:
    """Look up the membership by its unique (clinic_id, veterinarian_id) key."""
    stmt = select(ClinicMember).where(
        ClinicMember.clinic_id == clinic_id,
        ClinicMember.veterinarian_id == vet_id,
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def has_clinic_role(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    allowed_roles: Iterable[ClinicRole],
    active_only: bool = True,
) -> bool:
    """
    Check whether the vet holds one of ``allowed_roles`` in the clinic.

    Invited and deactivated members hold no role unless ``active_only`` is
    False.
    """
    member = await get_membership(session, vet_id, clinic_id)
    if member is None:
        return False
    if active_only and member.status != MemberStatus.ACTIVE:
        return False
    return member.role in set(allowed_roles)


async def is_active_member(
    session: AsyncSession, vet_id: uuid.UUID, clinic_id: uuid.UUID
) -> bool:
    return await has_clinic_role(session, vet_id, clinic_id, ClinicRole)


async def require_clinic_role(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    allowed_roles: Iterable[ClinicRole],
    message: str = "Insufficient permissions",
) -> None:
    """
    Raise AuthorizationException unless the vet holds one of the roles.
    """
    roles = list(allowed_roles)
    if not await has_clinic_role(session, vet_id, clinic_id, roles):
        raise AuthorizationException(
            message, required_roles=[role.value for role in roles]
        )


async def require_active_member(
    session: AsyncSession,
    vet_id: uuid.UUID,
    clinic_id: uuid.UUID,
    message: str = "You are not an active member of this clinic",
) -> None:
    if not await is_active_member(session, vet_id, clinic_id):
        raise AuthorizationException(message)
