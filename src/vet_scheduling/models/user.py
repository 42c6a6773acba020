"""
User model for the vet-scheduling package.

Users are pet owners. They request appointments for their pets but never
manage clinic schedules.
"""

from typing import List, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class User(BaseModel):
    """Pet owner account."""

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="User's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="User's last name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User's email address",
    )

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True, comment="User's phone number"
    )

    pets: Mapped[List["Pet"]] = relationship(
        "Pet", back_populates="owner", lazy="raise"
    )

    @property
    def full_name(self) -> str:
        """Get the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
