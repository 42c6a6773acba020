"""
Pet model for the vet-scheduling package.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel


class Pet(BaseModel):
    """Pet profile referenced by appointments."""

    __tablename__ = "pets"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the pet owner",
    )

    name: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Pet's name"
    )

    species: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="Species, e.g. dog or cat"
    )

    breed: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Pet's breed"
    )

    owner: Mapped["User"] = relationship("User", back_populates="pets", lazy="raise")

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check whether the given user owns this pet."""
        return self.owner_id == user_id

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', species='{self.species}')>"
