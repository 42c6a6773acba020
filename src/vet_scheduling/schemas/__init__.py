"""
Pydantic schemas for request/response validation and serialization.
"""

from .appointment import (
    AppointmentAssignConfirm,
    AppointmentCreate,
    AppointmentDetail,
    AppointmentDetailResponse,
    AppointmentListResponse,
    AppointmentManage,
    AppointmentMessageResponse,
    AppointmentRequestCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ClinicSummary,
    ManageAction,
    PendingRequestsResponse,
    PetSummary,
    SlotsResponse,
)
from .clinic import (
    AvailabilityUpdate,
    ClinicCreate,
    ClinicListResponse,
    ClinicMessageResponse,
    ClinicResponse,
    ClinicUpdate,
    InvitationAction,
    InvitationListResponse,
    InvitationRespond,
    InvitationResponse,
    MemberAdd,
    MemberMessageResponse,
    MyClinicResponse,
    StaffListResponse,
    StaffMemberResponse,
)

__all__ = [
    # Appointment schemas
    "AppointmentAssignConfirm",
    "AppointmentCreate",
    "AppointmentDetail",
    "AppointmentDetailResponse",
    "AppointmentListResponse",
    "AppointmentManage",
    "AppointmentMessageResponse",
    "AppointmentRequestCreate",
    "AppointmentResponse",
    "AppointmentStatusUpdate",
    "ClinicSummary",
    "ManageAction",
    "PendingRequestsResponse",
    "PetSummary",
    "SlotsResponse",
    # Clinic schemas
    "AvailabilityUpdate",
    "ClinicCreate",
    "ClinicListResponse",
    "ClinicMessageResponse",
    "ClinicResponse",
    "ClinicUpdate",
    "InvitationAction",
    "InvitationListResponse",
    "InvitationRespond",
    "InvitationResponse",
    "MemberAdd",
    "MemberMessageResponse",
    "MyClinicResponse",
    "StaffListResponse",
    "StaffMemberResponse",
]
