"""
Appointment model for the vet-scheduling package.

This module contains the Appointment SQLAlchemy model with scheduling
information, status tracking, and relationships to clinics, veterinarians
and pets.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, FrozenSet, Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class AppointmentStatus(enum.Enum):
    """Enumeration of appointment statuses."""

    PENDING_APPROVAL = "PENDING_APPROVAL"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Appointments in these statuses no longer occupy the veterinarian's time.
NON_BLOCKING_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW}
)

TERMINAL_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }
)


class Appointment(BaseModel):
    """
    A scheduled or requested visit.

    Vet bookings start CONFIRMED, owner requests start PENDING_APPROVAL and
    may have no veterinarian until a clinic manager assigns one. Rows are
    never deleted; cancellation is a status.
    """

    __tablename__ = "appointments"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Appointment with default values."""
        if "status" not in kwargs:
            kwargs["status"] = AppointmentStatus.PENDING_APPROVAL
        super().__init__(**kwargs)

    clinic_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clinics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the clinic where appointment takes place",
    )

    veterinarian_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("veterinarians.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="UUID of the assigned veterinarian, empty for unassigned requests",
    )

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the pet for this appointment",
    )

    start_at: Mapped[datetime] = mapped_column(
        nullable=False, index=True, comment="Start of the visit (inclusive)"
    )

    end_at: Mapped[datetime] = mapped_column(
        nullable=False, comment="End of the visit (exclusive)"
    )

    reason: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Reason for the appointment"
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Additional notes about the appointment"
    )

    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus),
        nullable=False,
        default=AppointmentStatus.PENDING_APPROVAL,
        index=True,
        comment="Current status of the appointment",
    )

    clinic: Mapped["Clinic"] = relationship(
        "Clinic", back_populates="appointments", lazy="raise"
    )

    pet: Mapped["Pet"] = relationship("Pet", lazy="raise")

    veterinarian: Mapped[Optional["Veterinarian"]] = relationship(
        "Veterinarian", lazy="raise"
    )

    __table_args__ = (
        CheckConstraint("start_at < end_at", name="ck_appointments_start_before_end"),
        Index("idx_appointments_vet_start", "veterinarian_id", "start_at"),
        Index(
            "idx_appointments_vet_clinic_start",
            "veterinarian_id",
            "clinic_id",
            "start_at",
        ),
        Index("idx_appointments_clinic_status", "clinic_id", "status"),
    )

    @property
    def duration_minutes(self) -> int:
        return int((self.end_at - self.start_at).total_seconds() // 60)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, start_at={self.start_at}, "
            f"status={self.status.value})>"
        )
