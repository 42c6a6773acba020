"""
Tests for the scheduling models.

Covers constructor defaults, computed properties and the constraints the
database enforces on SQLite as well as PostgreSQL.
"""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from .conftest import AppointmentFactory, ClinicFactory, VeterinarianFactory, utc
from vet_scheduling.models import (
    MANAGER_ROLES,
    Appointment,
    AppointmentStatus,
    Clinic,
    ClinicMember,
    ClinicRole,
    MemberStatus,
    Pet,
    Veterinarian,
    VeterinarianStatus,
)
from vet_scheduling.models.clinic import PERSONAL_CLINIC_ADDRESS


class TestBaseModel:
    """Test cases for functionality shared by all models."""

    def test_id_is_assigned_on_construction(self):
        clinic = Clinic(name="Eager Id")

        assert isinstance(clinic.id, uuid.UUID)

    def test_to_dict_serializes_values(self):
        start = utc(2024, 1, 10, 10, 0)
        appointment = Appointment(
            clinic_id=uuid.uuid4(),
            pet_id=uuid.uuid4(),
            start_at=start,
            end_at=start + timedelta(minutes=30),
        )

        data = appointment.to_dict()

        assert data["id"] == str(appointment.id)
        assert data["start_at"] == "2024-01-10T10:00:00+00:00"
        assert data["status"] == "PENDING_APPROVAL"
        assert data["veterinarian_id"] is None

    def test_update_fields(self):
        clinic = Clinic(name="Old Name")

        clinic.update_fields(name="New Name", address="1 Main St")

        assert clinic.name == "New Name"
        assert clinic.address == "1 Main St"

    def test_update_fields_rejects_unknown_attribute(self):
        with pytest.raises(AttributeError):
            Clinic(name="Clinic").update_fields(opening_hours="9-5")

    async def test_timestamps_are_set_on_flush(self, async_session, vet):
        assert vet.created_at is not None
        assert vet.updated_at is not None


class TestAppointmentModel:
    """Test cases for the Appointment model."""

    def _appointment(self, status=AppointmentStatus.CONFIRMED, minutes=45):
        start = utc(2024, 1, 10, 10, 0)
        return Appointment(
            clinic_id=uuid.uuid4(),
            pet_id=uuid.uuid4(),
            start_at=start,
            end_at=start + timedelta(minutes=minutes),
            status=status,
        )

    def test_defaults_to_pending(self):
        appointment = Appointment(clinic_id=uuid.uuid4(), pet_id=uuid.uuid4())

        assert appointment.status == AppointmentStatus.PENDING_APPROVAL

    def test_duration_minutes(self):
        assert self._appointment(minutes=45).duration_minutes == 45

    @pytest.mark.parametrize(
        "status,terminal",
        [
            (AppointmentStatus.PENDING_APPROVAL, False),
            (AppointmentStatus.CONFIRMED, False),
            (AppointmentStatus.COMPLETED, True),
            (AppointmentStatus.CANCELLED, True),
            (AppointmentStatus.NO_SHOW, True),
        ],
    )
    def test_is_terminal(self, status, terminal):
        assert self._appointment(status=status).is_terminal is terminal

    async def test_end_must_follow_start(self, async_session, clinic, pet):
        with pytest.raises(IntegrityError):
            await AppointmentFactory.create(
                async_session, clinic, pet, duration_minutes=0
            )

    async def test_vet_is_optional(self, async_session, clinic, pet):
        appointment = await AppointmentFactory.create(
            async_session, clinic, pet, status=AppointmentStatus.PENDING_APPROVAL
        )

        assert appointment.veterinarian_id is None


class TestClinicModels:
    """Test cases for Clinic and ClinicMember."""

    def test_clinic_defaults(self):
        assert Clinic(name="Plain").is_personal is False

    def test_personal_clinic(self):
        vet = Veterinarian(first_name="Ana", last_name="Lopez", email="ana@x.test")

        clinic = Clinic.personal_for(vet.display_name, created_by=vet.id)

        assert clinic.name == "Dr. Ana Lopez's Practice"
        assert clinic.address == PERSONAL_CLINIC_ADDRESS
        assert clinic.is_personal is True
        assert clinic.created_by == vet.id

    def test_member_defaults(self):
        member = ClinicMember(clinic_id=uuid.uuid4(), veterinarian_id=uuid.uuid4())

        assert member.role == ClinicRole.VET
        assert member.status == MemberStatus.ACTIVE
        assert member.is_available is True
        assert member.is_active

    def test_manager_roles(self):
        assert MANAGER_ROLES == frozenset({ClinicRole.OWNER, ClinicRole.ADMIN})

    def test_activate_and_deactivate(self):
        member = ClinicMember(
            clinic_id=uuid.uuid4(),
            veterinarian_id=uuid.uuid4(),
            status=MemberStatus.INVITED,
        )

        member.activate()
        assert member.status == MemberStatus.ACTIVE
        member.deactivate()
        assert member.status == MemberStatus.INACTIVE

    async def test_membership_is_unique_per_clinic_and_vet(
        self, async_session, vet, clinic
    ):
        with pytest.raises(IntegrityError):
            await ClinicFactory.add_member(async_session, clinic, vet)

    async def test_latitude_range(self, async_session):
        with pytest.raises(IntegrityError):
            await ClinicFactory.create(async_session, latitude=91.0)


class TestIdentityModels:
    """Test cases for Veterinarian, User and Pet."""

    def test_veterinarian_names(self):
        vet = Veterinarian(first_name="Jane", last_name="Smith", email="j@x.test")

        assert vet.status == VeterinarianStatus.ACTIVE
        assert vet.full_name == "Jane Smith"
        assert vet.display_name == "Dr. Jane Smith"

    async def test_veterinarian_email_is_unique(self, async_session, vet):
        with pytest.raises(IntegrityError):
            await VeterinarianFactory.create(async_session, email=vet.email)

    def test_pet_ownership(self):
        owner_id = uuid.uuid4()
        pet = Pet(owner_id=owner_id, name="Rex", species="dog")

        assert pet.is_owned_by(owner_id)
        assert not pet.is_owned_by(uuid.uuid4())

    async def test_owner_full_name(self, owner):
        assert owner.full_name == "Test Owner"
