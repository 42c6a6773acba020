"""
Appointment Pydantic schemas for API validation and serialization.

This module contains the request bodies for booking, requesting and managing
appointments, and the response envelopes the HTTP layer returns.
"""

import enum
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from ..models.appointment import AppointmentStatus
from .base import RequestSchema, ResponseSchema, blank_to_none, utc_or_none

DEFAULT_CLINIC_SENTINEL = "default"


class ManageAction(str, enum.Enum):
    """Actions a clinic member can take on an appointment request."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    ASSIGN = "ASSIGN"


def _optional_clinic_id(value: Any) -> Any:
    """Treat a missing, empty or ``"default"`` clinic id as no clinic."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", DEFAULT_CLINIC_SENTINEL):
        return None
    return value


class AppointmentCreate(RequestSchema):
    """Direct booking by a veterinarian."""

    clinic_id: Optional[UUID] = Field(
        None, description="Clinic to book in; the vet's own practice when omitted"
    )
    pet_id: UUID = Field(..., description="Pet the appointment is for")
    start_date_time: datetime = Field(..., description="Start of the visit")
    end_date_time: datetime = Field(..., description="End of the visit")
    reason: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("clinic_id", mode="before")
    @classmethod
    def normalize_clinic_id(cls, v: Any) -> Any:
        return _optional_clinic_id(v)

    @field_validator("reason", "notes")
    @classmethod
    def validate_text_fields(cls, v: Optional[str]) -> Optional[str]:
        """Collapse blank text to None."""
        return blank_to_none(v)


class AppointmentRequestCreate(RequestSchema):
    """Appointment request submitted by a pet owner."""

    clinic_id: Optional[UUID] = Field(None, description="Clinic to request at")
    vet_id: Optional[UUID] = Field(None, description="Preferred veterinarian")
    pet_id: UUID = Field(..., description="Pet the appointment is for")
    start_date_time: datetime = Field(..., description="Requested start time")
    reason: Optional[str] = Field(None, max_length=2000)

    @field_validator("clinic_id", mode="before")
    @classmethod
    def normalize_clinic_id(cls, v: Any) -> Any:
        return _optional_clinic_id(v)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class AppointmentStatusUpdate(RequestSchema):
    """Schema for updating appointment status."""

    status: AppointmentStatus = Field(..., description="Target status")


class AppointmentManage(RequestSchema):
    """Approve, reject or reassign an appointment request."""

    action: ManageAction
    vet_id: Optional[UUID] = Field(
        None, description="Veterinarian to assign, required for ASSIGN"
    )


class AppointmentAssignConfirm(RequestSchema):
    """Assign a veterinarian, fix the duration and confirm in one step."""

    vet_id: UUID
    duration_minutes: int = Field(..., gt=0, description="Visit length in minutes")


class PetSummary(ResponseSchema):
    id: UUID
    name: str
    species: str


class ClinicSummary(ResponseSchema):
    id: UUID
    name: str


class AppointmentResponse(ResponseSchema):
    """Schema for appointment responses."""

    id: UUID
    clinic_id: UUID
    veterinarian_id: Optional[UUID] = Field(None, alias="vetId")
    pet_id: UUID
    start_at: datetime = Field(..., alias="startDateTime")
    end_at: datetime = Field(..., alias="endDateTime")
    reason: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime

    @field_validator("start_at", "end_at", "created_at", "updated_at")
    @classmethod
    def attach_utc(cls, v: datetime) -> datetime:
        return utc_or_none(v)


class AppointmentDetail(AppointmentResponse):
    """Appointment with the pet and clinic summaries loaded."""

    pet: PetSummary
    clinic: ClinicSummary


class AppointmentMessageResponse(ResponseSchema):
    message: str
    appointment: AppointmentResponse


class AppointmentDetailResponse(ResponseSchema):
    appointment: AppointmentDetail


class AppointmentListResponse(ResponseSchema):
    appointments: List[AppointmentDetail]


class PendingRequestsResponse(ResponseSchema):
    requests: List[AppointmentDetail]


class SlotsResponse(ResponseSchema):
    slots: List[str] = Field(..., description="Free slot start times as HH:MM")
