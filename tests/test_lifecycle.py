"""
Tests for the appointment lifecycle rules.
"""

import uuid

import pytest

from vet_scheduling.exceptions import InvalidStatusTransitionException
from vet_scheduling.models import Appointment, AppointmentStatus
from vet_scheduling.services import (
    ALLOWED_TRANSITIONS,
    apply_transition,
    can_transition,
    validate_transition,
)

S = AppointmentStatus


class TestTransitionTable:
    """Test cases for the allowed transition graph."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING_APPROVAL, S.CONFIRMED),
            (S.PENDING_APPROVAL, S.CANCELLED),
            (S.CONFIRMED, S.COMPLETED),
            (S.CONFIRMED, S.CANCELLED),
            (S.CONFIRMED, S.NO_SHOW),
        ],
    )
    def test_allowed_edges(self, current, target):
        assert can_transition(current, target)
        validate_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING_APPROVAL, S.COMPLETED),
            (S.PENDING_APPROVAL, S.NO_SHOW),
            (S.CONFIRMED, S.PENDING_APPROVAL),
            (S.COMPLETED, S.CONFIRMED),
            (S.CANCELLED, S.CONFIRMED),
            (S.NO_SHOW, S.COMPLETED),
        ],
    )
    def test_disallowed_edges(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            validate_transition(current, target)

        assert exc_info.value.status_code == 400
        assert exc_info.value.current_status == current.value
        assert exc_info.value.target_status == target.value

    @pytest.mark.parametrize("status", list(S))
    def test_self_transitions_are_rejected(self, status):
        assert not can_transition(status, status)

    def test_terminal_statuses_have_no_exits(self):
        for status in (S.COMPLETED, S.CANCELLED, S.NO_SHOW):
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_every_status_is_covered(self):
        assert set(ALLOWED_TRANSITIONS) == set(S)


class TestApplyTransition:
    """Test cases for applying a transition to an appointment."""

    def _appointment(self, status: AppointmentStatus) -> Appointment:
        return Appointment(
            clinic_id=uuid.uuid4(),
            pet_id=uuid.uuid4(),
            status=status,
        )

    def test_updates_status_and_actor(self):
        appointment = self._appointment(S.PENDING_APPROVAL)
        actor = uuid.uuid4()

        previous = apply_transition(appointment, S.CONFIRMED, actor_id=actor)

        assert previous == S.PENDING_APPROVAL
        assert appointment.status == S.CONFIRMED
        assert appointment.updated_by == actor

    def test_invalid_transition_leaves_appointment_untouched(self):
        appointment = self._appointment(S.CANCELLED)

        with pytest.raises(InvalidStatusTransitionException):
            apply_transition(appointment, S.CANCELLED)

        assert appointment.status == S.CANCELLED
