"""
Tests for the vet-scheduling exception hierarchy.

This module tests the status codes, details and client-facing error bodies
produced by the custom exceptions.
"""

import logging
import uuid

import pytest

from vet_scheduling.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BusinessRuleException,
    DatabaseException,
    InvalidRangeException,
    InvalidStatusTransitionException,
    NotFoundException,
    SchedulingConflictException,
    TransactionException,
    ValidationException,
    VetSchedulingException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)


class TestVetSchedulingException:
    """Test cases for the base exception."""

    def test_basic_exception_creation(self):
        exc = VetSchedulingException("Something went wrong")

        assert exc.message == "Something went wrong"
        assert exc.error_code == "VetSchedulingException"
        assert exc.details == {}
        assert exc.status_code == 500
        assert str(exc) == "Something went wrong"

    def test_exception_with_details(self):
        exc = VetSchedulingException("Oops", "CUSTOM", {"key": "value"})

        assert exc.error_code == "CUSTOM"
        assert str(exc) == "Oops (Details: {'key': 'value'})"

    def test_to_dict_method(self):
        result = VetSchedulingException("Oops", "CUSTOM").to_dict()

        assert result["error_type"] == "VetSchedulingException"
        assert result["error_code"] == "CUSTOM"
        assert result["message"] == "Oops"
        assert "timestamp" in result


class TestStatusCodes:
    """Every exception maps to the HTTP status the API returns."""

    @pytest.mark.parametrize(
        "exc,status_code",
        [
            (ValidationException(), 400),
            (InvalidRangeException(), 400),
            (BusinessRuleException(), 400),
            (InvalidStatusTransitionException("CANCELLED", "CONFIRMED"), 400),
            (AuthenticationException(), 401),
            (AuthorizationException(), 403),
            (NotFoundException(), 404),
            (SchedulingConflictException(), 409),
            (DatabaseException("boom"), 500),
        ],
    )
    def test_status_code(self, exc, status_code):
        assert exc.status_code == status_code

    def test_hierarchy(self):
        assert issubclass(InvalidRangeException, ValidationException)
        assert issubclass(InvalidStatusTransitionException, BusinessRuleException)
        assert issubclass(TransactionException, DatabaseException)
        assert issubclass(SchedulingConflictException, VetSchedulingException)


class TestExceptionDetails:
    """Test cases for the details each exception records."""

    def test_validation_exception(self):
        exc = ValidationException("Bad value", field="vetId", value=42)

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"field": "vetId", "value": "42"}

    def test_invalid_range(self):
        exc = InvalidRangeException(start="10:00", end="09:00")

        assert exc.error_code == "INVALID_RANGE"
        assert exc.message == "End time must be after start time"
        assert exc.details == {"start": "10:00", "end": "09:00"}

    def test_status_transition(self):
        exc = InvalidStatusTransitionException("COMPLETED", "CONFIRMED")

        assert exc.message == "Cannot change appointment status from COMPLETED to CONFIRMED"
        assert exc.error_code == "INVALID_STATUS_TRANSITION"
        assert exc.details["rule_name"] == "appointment_lifecycle"

    def test_not_found_stringifies_ids(self):
        resource_id = uuid.uuid4()
        exc = NotFoundException("Pet not found", "pet", resource_id)

        assert exc.details == {"resource": "pet", "resource_id": str(resource_id)}

    def test_conflict_records_vet_and_clinic(self):
        vet_id, clinic_id = uuid.uuid4(), uuid.uuid4()
        exc = SchedulingConflictException(vet_id=vet_id, clinic_id=clinic_id)

        assert exc.details == {"vet_id": str(vet_id), "clinic_id": str(clinic_id)}
        assert exc.description == (
            "You already have an appointment during this time range."
        )

    def test_database_exception_keeps_original_error(self):
        original = RuntimeError("connection reset")
        exc = TransactionException(operation="commit", original_error=original)

        assert exc.original_error is original
        assert exc.details == {
            "operation": "commit",
            "original_error": "connection reset",
        }


class TestExceptionUtilities:
    """Test cases for the formatting and logging helpers."""

    def test_error_response_is_message_only(self):
        exc = NotFoundException("Clinic not found", "clinic", uuid.uuid4())

        assert create_error_response(exc) == {"error": "Clinic not found"}

    def test_conflict_error_response_adds_description(self):
        assert create_error_response(SchedulingConflictException()) == {
            "error": "Time slot conflict",
            "message": "You already have an appointment during this time range.",
        }

    def test_format_validation_errors(self):
        errors = [
            {"loc": ("body", "petId"), "msg": "Field required", "type": "missing"},
            {
                "loc": ("body", "phone"),
                "msg": "Invalid phone number format",
                "type": "value_error",
            },
            {
                "loc": ("query", "date"),
                "msg": "Input should be a valid date",
                "type": "date_from_datetime_parsing",
            },
        ]

        assert format_validation_errors(errors) == {
            "petId": ["This field is required"],
            "phone": ["Invalid phone number format"],
            "date": ["Input should be a valid date (type: date_from_datetime_parsing)"],
        }

    def test_log_exception_context(self, caplog):
        logger = logging.getLogger("tests.exceptions")

        with caplog.at_level(logging.WARNING, logger="tests.exceptions"):
            log_exception_context(
                AuthorizationException(), {"path": "/clinics"}, logger, logging.WARNING
            )
            log_exception_context(RuntimeError("boom"), {"path": "/health"}, logger)

        messages = [r.getMessage() for r in caplog.records]
        assert "Exception with context: Insufficient permissions" in messages
        assert "Unhandled exception: boom" in messages
