"""
Veterinarian model for the vet-scheduling package.

Veterinarians are the principals that run clinics and take appointments.
Their clinic roles live on ClinicMember, not here.
"""

import enum
from typing import Any, List, Optional

from sqlalchemy import Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class VeterinarianStatus(enum.Enum):
    """Enumeration of veterinarian account statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Veterinarian(BaseModel):
    """Veterinarian identity and contact profile."""

    __tablename__ = "veterinarians"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Veterinarian with default values."""
        if "status" not in kwargs:
            kwargs["status"] = VeterinarianStatus.ACTIVE
        super().__init__(**kwargs)

    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Veterinarian's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Veterinarian's last name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login and invitation email",
    )

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True, comment="Contact phone number"
    )

    license_number: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True, comment="Professional license number"
    )

    status: Mapped[VeterinarianStatus] = mapped_column(
        Enum(VeterinarianStatus),
        nullable=False,
        default=VeterinarianStatus.ACTIVE,
        comment="Account status",
    )

    memberships: Mapped[List["ClinicMember"]] = relationship(
        "ClinicMember", back_populates="veterinarian", lazy="raise"
    )

    __table_args__ = (Index("idx_veterinarians_name", "last_name", "first_name"),)

    @property
    def full_name(self) -> str:
        """Get the veterinarian's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        """Name with the professional title, as shown to pet owners."""
        return f"Dr. {self.full_name}"

    def __repr__(self) -> str:
        return f"<Veterinarian(id={self.id}, email='{self.email}')>"
