"""
ClinicMember model for the vet-scheduling package.

A membership grants a veterinarian a role inside a clinic. All clinic-scoped
authorization is derived from these rows.
"""

import enum
import uuid
from typing import Any, FrozenSet

from sqlalchemy import Boolean, Enum, ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class ClinicRole(enum.Enum):
    """Role a veterinarian holds inside a clinic."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    VET = "VET"


class MemberStatus(enum.Enum):
    """Lifecycle of a clinic membership."""

    ACTIVE = "ACTIVE"
    INVITED = "INVITED"
    INACTIVE = "INACTIVE"


MANAGER_ROLES: FrozenSet[ClinicRole] = frozenset({ClinicRole.OWNER, ClinicRole.ADMIN})


class ClinicMember(BaseModel):
    """Join entity associating a veterinarian with a clinic."""

    __tablename__ = "clinic_members"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize ClinicMember with default values."""
        if "role" not in kwargs:
            kwargs["role"] = ClinicRole.VET
        if "status" not in kwargs:
            kwargs["status"] = MemberStatus.ACTIVE
        if "is_available" not in kwargs:
            kwargs["is_available"] = True
        super().__init__(**kwargs)

    clinic_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clinics.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the clinic",
    )

    veterinarian_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("veterinarians.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the member veterinarian",
    )

    role: Mapped[ClinicRole] = mapped_column(
        Enum(ClinicRole),
        nullable=False,
        default=ClinicRole.VET,
        comment="Role within the clinic",
    )

    status: Mapped[MemberStatus] = mapped_column(
        Enum(MemberStatus),
        nullable=False,
        default=MemberStatus.ACTIVE,
        index=True,
        comment="Membership status",
    )

    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="Whether the member currently takes appointments at this clinic",
    )

    clinic: Mapped["Clinic"] = relationship(
        "Clinic", back_populates="members", lazy="raise"
    )

    veterinarian: Mapped["Veterinarian"] = relationship(
        "Veterinarian", back_populates="memberships", lazy="raise"
    )

    __table_args__ = (
        UniqueConstraint(
            "clinic_id", "veterinarian_id", name="uq_clinic_members_clinic_vet"
        ),
        Index("idx_clinic_members_vet_status", "veterinarian_id", "status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    def activate(self) -> None:
        self.status = MemberStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = MemberStatus.INACTIVE

    def __repr__(self) -> str:
        return (
            f"<ClinicMember(clinic_id={self.clinic_id}, "
            f"veterinarian_id={self.veterinarian_id}, role={self.role.value})>"
        )
