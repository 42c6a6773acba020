"""
Tests for appointment conflict detection.
"""

import pytest

from .conftest import AppointmentFactory, ClinicFactory, VeterinarianFactory, utc
from vet_scheduling.exceptions import InvalidRangeException, SchedulingConflictException
from vet_scheduling.models import AppointmentStatus
from vet_scheduling.services import ensure_no_conflict, has_conflict
from vet_scheduling.utils import intervals_overlap


class TestIntervalsOverlap:
    """Test cases for the half-open overlap predicate."""

    def test_partial_overlap(self):
        assert intervals_overlap(
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
            utc(2024, 1, 10, 10, 15),
            utc(2024, 1, 10, 10, 45),
        )

    def test_containment(self):
        assert intervals_overlap(
            utc(2024, 1, 10, 9, 0),
            utc(2024, 1, 10, 12, 0),
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )

    def test_back_to_back_does_not_overlap(self):
        """An interval ending exactly when the next starts is not a conflict."""
        assert not intervals_overlap(
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
            utc(2024, 1, 10, 10, 30),
            utc(2024, 1, 10, 11, 0),
        )
        assert not intervals_overlap(
            utc(2024, 1, 10, 10, 30),
            utc(2024, 1, 10, 11, 0),
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )


class TestHasConflict:
    """Test cases for the database-backed conflict checker."""

    async def test_overlapping_appointment_conflicts(
        self, async_session, vet, clinic, pet
    ):
        await AppointmentFactory.create(async_session, clinic, pet, vet=vet)

        assert await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 15),
            utc(2024, 1, 10, 10, 45),
        )

    async def test_back_to_back_is_free(self, async_session, vet, clinic, pet):
        await AppointmentFactory.create(async_session, clinic, pet, vet=vet)

        assert not await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 30),
            utc(2024, 1, 10, 11, 0),
        )
        assert not await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 9, 30),
            utc(2024, 1, 10, 10, 0),
        )

    @pytest.mark.parametrize(
        "status", [AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW]
    )
    async def test_non_blocking_statuses_are_ignored(
        self, async_session, vet, clinic, pet, status
    ):
        await AppointmentFactory.create(
            async_session, clinic, pet, vet=vet, status=status
        )

        assert not await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )

    async def test_pending_request_blocks(self, async_session, vet, clinic, pet):
        await AppointmentFactory.create(
            async_session,
            clinic,
            pet,
            vet=vet,
            status=AppointmentStatus.PENDING_APPROVAL,
        )

        assert await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )

    async def test_other_vet_is_not_affected(self, async_session, vet, clinic, pet):
        other = await VeterinarianFactory.create(async_session)
        await AppointmentFactory.create(async_session, clinic, pet, vet=vet)

        assert not await has_conflict(
            async_session,
            other.id,
            clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )

    async def test_checks_are_scoped_to_clinic(self, async_session, vet, clinic, pet):
        other_clinic = await ClinicFactory.create(async_session)
        await AppointmentFactory.create(async_session, clinic, pet, vet=vet)

        assert not await has_conflict(
            async_session,
            vet.id,
            other_clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )

    async def test_excluded_appointment_is_ignored(
        self, async_session, vet, clinic, pet
    ):
        appointment = await AppointmentFactory.create(
            async_session, clinic, pet, vet=vet
        )

        assert not await has_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
            exclude_appointment_id=appointment.id,
        )

    @pytest.mark.parametrize(
        "start,end",
        [
            (utc(2024, 1, 10, 11, 0), utc(2024, 1, 10, 10, 0)),
            (utc(2024, 1, 10, 10, 0), utc(2024, 1, 10, 10, 0)),
        ],
    )
    async def test_invalid_range_is_rejected(
        self, async_session, vet, clinic, start, end
    ):
        with pytest.raises(InvalidRangeException):
            await has_conflict(async_session, vet.id, clinic.id, start, end)


class TestEnsureNoConflict:
    """Test cases for the raising variant."""

    async def test_raises_on_conflict(self, async_session, vet, clinic, pet):
        await AppointmentFactory.create(async_session, clinic, pet, vet=vet)

        with pytest.raises(SchedulingConflictException) as exc_info:
            await ensure_no_conflict(
                async_session,
                vet.id,
                clinic.id,
                utc(2024, 1, 10, 10, 15),
                utc(2024, 1, 10, 10, 45),
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.details["vet_id"] == str(vet.id)

    async def test_passes_when_free(self, async_session, vet, clinic):
        await ensure_no_conflict(
            async_session,
            vet.id,
            clinic.id,
            utc(2024, 1, 10, 10, 0),
            utc(2024, 1, 10, 10, 30),
        )
