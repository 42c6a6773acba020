"""
Clinic model for the vet-scheduling package.

This module contains the Clinic SQLAlchemy model with location data and its
relationships to staff memberships and appointments.
"""

from typing import Any, List, Optional

from sqlalchemy import Boolean, CheckConstraint, Float, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

PERSONAL_CLINIC_ADDRESS = "To be defined"


class Clinic(BaseModel):
    """
    A practice location.

    A clinic owns its staff memberships and its appointments. Personal
    clinics are provisioned automatically for veterinarians who book before
    belonging to any practice.
    """

    __tablename__ = "clinics"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Clinic with default values."""
        if "is_personal" not in kwargs:
            kwargs["is_personal"] = False
        super().__init__(**kwargs)

    name: Mapped[str] = mapped_column(
        String(200), nullable=False, index=True, comment="Clinic name"
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Street address"
    )

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True, comment="Main clinic phone number"
    )

    latitude: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Latitude coordinate"
    )

    longitude: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="Longitude coordinate"
    )

    is_personal: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Provisioned automatically for a single veterinarian",
    )

    members: Mapped[List["ClinicMember"]] = relationship(
        "ClinicMember", back_populates="clinic", lazy="raise"
    )

    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment", back_populates="clinic", lazy="raise"
    )

    __table_args__ = (
        CheckConstraint(
            "latitude IS NULL OR (latitude >= -90 AND latitude <= 90)",
            name="ck_clinics_latitude_range",
        ),
        CheckConstraint(
            "longitude IS NULL OR (longitude >= -180 AND longitude <= 180)",
            name="ck_clinics_longitude_range",
        ),
    )

    @classmethod
    def personal_for(cls, display_name: str, **kwargs: Any) -> "Clinic":
        """Build the personal practice record for a veterinarian."""
        return cls(
            name=f"{display_name}'s Practice",
            address=PERSONAL_CLINIC_ADDRESS,
            is_personal=True,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<Clinic(id={self.id}, name='{self.name}')>"
