"""
Clinic Pydantic schemas for API validation and serialization.

Covers clinic creation and updates, staff membership management,
invitations and per-clinic availability.
"""

import enum
import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from ..models.clinic import Clinic
from ..models.clinic_member import ClinicMember, ClinicRole, MemberStatus
from ..models.veterinarian import Veterinarian
from .appointment import ClinicSummary
from .base import RequestSchema, ResponseSchema, blank_to_none, utc_or_none

PHONE_PATTERN = re.compile(r"^[0-9+\-\s().]{7,20}$")


class InvitationAction(str, enum.Enum):
    """Answers a veterinarian can give to a clinic invitation."""

    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


class ClinicBase(RequestSchema):
    """Fields shared by clinic create and update bodies."""

    address: Optional[str] = Field(None, max_length=500)
    phone_number: Optional[str] = Field(
        None, validation_alias=AliasChoices("phone", "phoneNumber", "phone_number")
    )
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: Optional[str]) -> Optional[str]:
        """Validate phone number format."""
        v = blank_to_none(v)
        if v is not None and not PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone number format")
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ClinicCreate(ClinicBase):
    """Schema for creating a new clinic."""

    name: str = Field(..., min_length=1, max_length=200, description="Clinic name")


class ClinicUpdate(ClinicBase):
    """Schema for updating clinic information; omitted fields are left alone."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)


class MemberAdd(RequestSchema):
    """Add a veterinarian to a clinic by email."""

    email: str = Field(
        ...,
        validation_alias=AliasChoices("email", "vetEmail", "vet_email"),
        max_length=255,
    )
    role: ClinicRole = ClinicRole.VET

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class InvitationRespond(RequestSchema):
    action: InvitationAction


class AvailabilityUpdate(RequestSchema):
    vet_id: UUID
    is_available: bool


class ClinicResponse(ResponseSchema):
    """Schema for clinic responses."""

    id: UUID
    name: str
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phone")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_personal: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def attach_utc(cls, v: datetime) -> datetime:
        return utc_or_none(v)


class MyClinicResponse(ClinicResponse):
    """A clinic together with the caller's role in it."""

    my_role: ClinicRole

    @classmethod
    def from_membership(cls, clinic: Clinic, member: ClinicMember) -> "MyClinicResponse":
        data = ClinicResponse.model_validate(clinic).model_dump()
        return cls(**data, my_role=member.role)


class StaffMemberResponse(ResponseSchema):
    """A clinic member with the veterinarian's contact details."""

    veterinarian_id: UUID = Field(..., alias="vetId")
    first_name: str
    last_name: str
    email: str
    role: ClinicRole
    status: MemberStatus
    is_available: bool
    joined_at: datetime

    @classmethod
    def from_member(
        cls, member: ClinicMember, vet: Veterinarian
    ) -> "StaffMemberResponse":
        return cls(
            veterinarian_id=vet.id,
            first_name=vet.first_name,
            last_name=vet.last_name,
            email=vet.email,
            role=member.role,
            status=member.status,
            is_available=member.is_available,
            joined_at=utc_or_none(member.created_at),
        )


class InvitationResponse(ResponseSchema):
    clinic: ClinicSummary
    role: ClinicRole
    invited_at: datetime

    @classmethod
    def from_member(cls, member: ClinicMember, clinic: Clinic) -> "InvitationResponse":
        return cls(
            clinic=ClinicSummary.model_validate(clinic),
            role=member.role,
            invited_at=utc_or_none(member.updated_at),
        )


class ClinicMessageResponse(ResponseSchema):
    message: str
    clinic: ClinicResponse


class ClinicListResponse(ResponseSchema):
    clinics: List[MyClinicResponse]


class StaffListResponse(ResponseSchema):
    staff: List[StaffMemberResponse]


class MemberMessageResponse(ResponseSchema):
    message: str
    member: StaffMemberResponse


class InvitationListResponse(ResponseSchema):
    invitations: List[InvitationResponse]
