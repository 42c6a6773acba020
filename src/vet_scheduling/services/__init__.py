"""
Scheduling services.

Each service function takes an AsyncSession and owns the unit of work it
describes; callers never commit on its behalf.
"""

from .appointments import (
    DURATION_OPTIONS,
    assign_and_confirm,
    create_appointment,
    get_appointment_detail,
    get_pending_requests,
    get_schedule,
    manage_request,
    request_appointment,
    update_status,
)
from .authorization import (
    get_membership,
    has_clinic_role,
    is_active_member,
    require_active_member,
    require_clinic_role,
)
from .clinics import (
    add_member,
    create_clinic,
    ensure_personal_clinic,
    get_clinic,
    get_clinic_staff,
    get_my_clinics,
    get_my_invitations,
    get_veterinarian,
    invite_member,
    respond_to_invitation,
    set_availability,
    update_clinic,
)
from .conflicts import ensure_no_conflict, has_conflict
from .lifecycle import (
    ALLOWED_TRANSITIONS,
    apply_transition,
    can_transition,
    validate_transition,
)
from .slots import generate_slots

__all__ = [
    # Appointments
    "DURATION_OPTIONS",
    "assign_and_confirm",
    "create_appointment",
    "get_appointment_detail",
    "get_pending_requests",
    "get_schedule",
    "manage_request",
    "request_appointment",
    "update_status",
    # Authorization
    "get_membership",
    "has_clinic_role",
    "is_active_member",
    "require_active_member",
    "require_clinic_role",
    # Clinics
    "add_member",
    "create_clinic",
    "ensure_personal_clinic",
    "get_clinic",
    "get_clinic_staff",
    "get_my_clinics",
    "get_my_invitations",
    "get_veterinarian",
    "invite_member",
    "respond_to_invitation",
    "set_availability",
    "update_clinic",
    # Conflicts and slots
    "ensure_no_conflict",
    "has_conflict",
    "generate_slots",
    # Lifecycle
    "ALLOWED_TRANSITIONS",
    "apply_transition",
    "can_transition",
    "validate_transition",
]
