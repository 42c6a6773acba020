"""
Vet Scheduling

Appointment scheduling for the veterinary clinic platform: conflict-free
booking, owner requests with an approval workflow, available-slot lookup and
clinic staff management.

It includes:

- SQLAlchemy models for clinics, memberships, appointments and the people
  and pets they reference
- Pydantic schemas for the camelCase HTTP request and response bodies
- Scheduling services (conflict checker, slot generator, lifecycle rules,
  clinic-scoped authorization, booking and request workflow)
- Async database engine and session management
- A FastAPI application exposing the scheduling endpoints

Quick Start:
    >>> from vet_scheduling.database import SessionManager, create_engine
    >>> from vet_scheduling.services import generate_slots

    >>> engine = create_engine("sqlite+aiosqlite:///./scheduling.db")
    >>> manager = SessionManager(engine)
    >>> async with manager.get_session() as session:
    ...     slots = await generate_slots(session, vet_id, date(2024, 1, 10))

Requirements:
    - Python 3.11+
    - PostgreSQL 13+ (SQLite for development and tests)
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
"""

__version__ = "0.1.0"
__author__ = "Vet Clinic Platform Team"
__email__ = "dev@vetclinic.com"
__license__ = "MIT"
__copyright__ = "Copyright 2025 Vet Clinic Platform Team"

# Import implemented modules
from . import database, exceptions, models, schemas, services, utils

# Convenience imports for common usage patterns
from .database import SessionManager, create_engine
from .exceptions import (
    NotFoundException,
    SchedulingConflictException,
    ValidationException,
    VetSchedulingException,
)
from .models import Appointment, AppointmentStatus, Clinic, ClinicMember, Veterinarian

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
    # Core modules
    "database",
    "exceptions",
    "models",
    "schemas",
    "services",
    "utils",
    # Convenience imports
    "SessionManager",
    "create_engine",
    "VetSchedulingException",
    "ValidationException",
    "NotFoundException",
    "SchedulingConflictException",
    "Appointment",
    "AppointmentStatus",
    "Clinic",
    "ClinicMember",
    "Veterinarian",
]
