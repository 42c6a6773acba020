"""
Pytest configuration and fixtures for vet-scheduling tests.

This module provides the in-memory database, factory classes for the
scheduling entities, and an HTTP client bound to the FastAPI application.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from vet_scheduling.api import PrincipalType, create_access_token, create_app
from vet_scheduling.database import SessionManager, create_engine
from vet_scheduling.models import (
    Appointment,
    AppointmentStatus,
    Base,
    Clinic,
    ClinicMember,
    ClinicRole,
    MemberStatus,
    Pet,
    User,
    Veterinarian,
)
from vet_scheduling.utils.config import SchedulingSettings

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory SQLite database for every test."""
    engine = create_engine(TEST_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_manager(test_engine: AsyncEngine) -> SessionManager:
    manager = SessionManager(test_engine)
    await manager.initialize_database(Base.metadata)
    return manager


@pytest_asyncio.fixture
async def async_session(
    session_manager: SessionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """Session used by tests to seed data and call services directly."""
    async with session_manager.get_session() as session:
        yield session


@pytest.fixture
def settings() -> SchedulingSettings:
    return SchedulingSettings(
        database_url=TEST_DATABASE_URL,
        jwt_secret_key=TEST_JWT_SECRET,
    )


@pytest_asyncio.fixture
async def client(
    settings: SchedulingSettings, session_manager: SessionManager
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the application in-process."""
    app = create_app(settings, session_manager=session_manager)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(
    principal_id: uuid.UUID, principal_type: PrincipalType = PrincipalType.VET
) -> Dict[str, str]:
    """Authorization header for a vet or pet owner."""
    token = create_access_token(principal_id, principal_type, TEST_JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


# Factory classes for creating test entities
class VeterinarianFactory:
    """Factory for creating test Veterinarian instances."""

    @staticmethod
    def build(**kwargs) -> Veterinarian:
        defaults = {
            "first_name": "Test",
            "last_name": f"Vet{uuid.uuid4().hex[:6]}",
            "email": f"vet_{uuid.uuid4().hex[:8]}@example.com",
            "license_number": f"LIC{uuid.uuid4().hex[:6].upper()}",
        }
        defaults.update(kwargs)
        return Veterinarian(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> Veterinarian:
        vet = VeterinarianFactory.build(**kwargs)
        session.add(vet)
        await session.flush()
        return vet


class UserFactory:
    """Factory for creating test pet owners."""

    @staticmethod
    def build(**kwargs) -> User:
        defaults = {
            "first_name": "Test",
            "last_name": "Owner",
            "email": f"owner_{uuid.uuid4().hex[:8]}@example.com",
            "phone_number": "+1234567890",
        }
        defaults.update(kwargs)
        return User(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> User:
        user = UserFactory.build(**kwargs)
        session.add(user)
        await session.flush()
        return user


class PetFactory:
    """Factory for creating test Pet instances."""

    @staticmethod
    async def create(
        session: AsyncSession, owner: Optional[User] = None, **kwargs
    ) -> Pet:
        if owner is None:
            owner = await UserFactory.create(session)

        defaults = {
            "owner_id": owner.id,
            "name": f"TestPet_{uuid.uuid4().hex[:8]}",
            "species": "dog",
            "breed": "Golden Retriever",
        }
        defaults.update(kwargs)
        pet = Pet(**defaults)
        session.add(pet)
        await session.flush()
        return pet


class ClinicFactory:
    """Factory for clinics and their memberships."""

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> Clinic:
        defaults = {
            "name": f"Test Clinic {uuid.uuid4().hex[:8]}",
            "address": "123 Test Street",
            "phone_number": "+1234567890",
        }
        defaults.update(kwargs)
        clinic = Clinic(**defaults)
        session.add(clinic)
        await session.flush()
        return clinic

    @staticmethod
    async def add_member(
        session: AsyncSession,
        clinic: Clinic,
        vet: Veterinarian,
        role: ClinicRole = ClinicRole.VET,
        status: MemberStatus = MemberStatus.ACTIVE,
        **kwargs,
    ) -> ClinicMember:
        member = ClinicMember(
            clinic_id=clinic.id,
            veterinarian_id=vet.id,
            role=role,
            status=status,
            **kwargs,
        )
        session.add(member)
        await session.flush()
        return member


class AppointmentFactory:
    """Factory for creating test Appointment instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        clinic: Clinic,
        pet: Pet,
        vet: Optional[Veterinarian] = None,
        start: Optional[datetime] = None,
        duration_minutes: int = 30,
        status: AppointmentStatus = AppointmentStatus.CONFIRMED,
        **kwargs,
    ) -> Appointment:
        start = start or utc(2024, 1, 10, 10, 0)
        appointment = Appointment(
            clinic_id=clinic.id,
            veterinarian_id=vet.id if vet else None,
            pet_id=pet.id,
            start_at=start,
            end_at=start + timedelta(minutes=duration_minutes),
            status=status,
            **kwargs,
        )
        session.add(appointment)
        await session.flush()
        return appointment


@pytest_asyncio.fixture
async def vet(async_session: AsyncSession) -> Veterinarian:
    return await VeterinarianFactory.create(
        async_session, first_name="Jane", last_name="Smith"
    )


@pytest_asyncio.fixture
async def owner(async_session: AsyncSession) -> User:
    return await UserFactory.create(async_session)


@pytest_asyncio.fixture
async def pet(async_session: AsyncSession, owner: User) -> Pet:
    return await PetFactory.create(async_session, owner=owner, name="Rex")


@pytest_asyncio.fixture
async def clinic(async_session: AsyncSession, vet: Veterinarian) -> Clinic:
    """A clinic where ``vet`` is the active OWNER."""
    clinic = await ClinicFactory.create(async_session, name="Downtown Vets")
    await ClinicFactory.add_member(async_session, clinic, vet, role=ClinicRole.OWNER)
    return clinic
