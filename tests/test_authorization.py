"""
Tests for clinic-scoped authorization checks.
"""

import pytest

from .conftest import ClinicFactory, VeterinarianFactory
from vet_scheduling.exceptions import AuthorizationException
from vet_scheduling.models import MANAGER_ROLES, ClinicRole, MemberStatus
from vet_scheduling.services import (
    get_membership,
    has_clinic_role,
    is_active_member,
    require_active_member,
    require_clinic_role,
)


class TestHasClinicRole:
    """Test cases for has_clinic_role."""

    async def test_owner_has_manager_role(self, async_session, vet, clinic):
        assert await has_clinic_role(async_session, vet.id, clinic.id, MANAGER_ROLES)

    async def test_vet_role_is_not_manager(self, async_session, clinic):
        staff = await VeterinarianFactory.create(async_session)
        await ClinicFactory.add_member(async_session, clinic, staff, role=ClinicRole.VET)

        assert not await has_clinic_role(
            async_session, staff.id, clinic.id, MANAGER_ROLES
        )
        assert await has_clinic_role(
            async_session, staff.id, clinic.id, [ClinicRole.VET]
        )

    async def test_non_member_has_no_role(self, async_session, clinic):
        outsider = await VeterinarianFactory.create(async_session)

        assert not await has_clinic_role(
            async_session, outsider.id, clinic.id, list(ClinicRole)
        )

    @pytest.mark.parametrize("status", [MemberStatus.INVITED, MemberStatus.INACTIVE])
    async def test_inactive_memberships_hold_no_role(
        self, async_session, clinic, status
    ):
        staff = await VeterinarianFactory.create(async_session)
        await ClinicFactory.add_member(
            async_session, clinic, staff, role=ClinicRole.ADMIN, status=status
        )

        assert not await has_clinic_role(
            async_session, staff.id, clinic.id, MANAGER_ROLES
        )
        assert await has_clinic_role(
            async_session, staff.id, clinic.id, MANAGER_ROLES, active_only=False
        )

    async def test_membership_lookup_by_unique_key(self, async_session, vet, clinic):
        member = await get_membership(async_session, vet.id, clinic.id)

        assert member is not None
        assert member.role == ClinicRole.OWNER


class TestRequireHelpers:
    """Test cases for the raising helpers."""

    async def test_require_clinic_role_raises_403(self, async_session, clinic):
        staff = await VeterinarianFactory.create(async_session)
        await ClinicFactory.add_member(async_session, clinic, staff)

        with pytest.raises(AuthorizationException) as exc_info:
            await require_clinic_role(
                async_session, staff.id, clinic.id, [ClinicRole.OWNER]
            )

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Insufficient permissions"
        assert exc_info.value.details["required_roles"] == ["OWNER"]

    async def test_require_active_member(self, async_session, vet, clinic):
        await require_active_member(async_session, vet.id, clinic.id)
        assert await is_active_member(async_session, vet.id, clinic.id)

        outsider = await VeterinarianFactory.create(async_session)
        with pytest.raises(AuthorizationException):
            await require_active_member(async_session, outsider.id, clinic.id)
