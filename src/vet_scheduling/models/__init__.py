"""
SQLAlchemy models for the vet scheduling package.

This module contains all the database models used for appointment
scheduling, clinic staffing and the identities they reference.
"""

from .appointment import (
    NON_BLOCKING_STATUSES,
    TERMINAL_STATUSES,
    Appointment,
    AppointmentStatus,
)
from .base import Base, BaseModel
from .clinic import Clinic
from .clinic_member import MANAGER_ROLES, ClinicMember, ClinicRole, MemberStatus
from .pet import Pet
from .user import User
from .veterinarian import Veterinarian, VeterinarianStatus

__all__ = [
    "Base",
    "BaseModel",
    "Appointment",
    "AppointmentStatus",
    "NON_BLOCKING_STATUSES",
    "TERMINAL_STATUSES",
    "Clinic",
    "ClinicMember",
    "ClinicRole",
    "MemberStatus",
    "MANAGER_ROLES",
    "Pet",
    "User",
    "Veterinarian",
    "VeterinarianStatus",
]
