"""
Appointment lifecycle rules.

Every status change goes through validate_transition, whichever endpoint
triggers it.
"""

import logging
import uuid
from typing import Dict, FrozenSet, Optional

from ..exceptions import InvalidStatusTransitionException
from ..models import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING_APPROVAL: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    """Check whether ``current -> target`` is an edge of the lifecycle graph."""
    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    """
    Reject status changes that are not lifecycle edges.

    Raises:
        InvalidStatusTransitionException: For self-transitions, moves out of
            a terminal status and any other edge not in ALLOWED_TRANSITIONS
    """
    if not can_transition(current, target):
        raise InvalidStatusTransitionException(current.value, target.value)


def apply_transition(
    appointment: Appointment,
    target: AppointmentStatus,
    actor_id: Optional[uuid.UUID] = None,
) -> AppointmentStatus:
    """
    Move an appointment to ``target`` after validating the edge.

    Returns:
        The status the appointment had before the change
    """
    previous = appointment.status
    validate_transition(previous, target)

    appointment.status = target
    if actor_id is not None:
        appointment.updated_by = actor_id

    logger.info(
        f"Appointment {appointment.id} moved from {previous.value} to {target.value}"
    )
    return previous
