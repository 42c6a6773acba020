"""
Core exceptions for the vet-scheduling package.

This module defines the exception hierarchy used by the scheduling services
and the HTTP layer. Every exception carries the HTTP status it maps to, so
route handlers never translate errors themselves.
"""

import logging
import time
from typing import Any, Dict, List, Optional


class VetSchedulingException(Exception):
    """
    Base exception class for all vet-scheduling package exceptions.

    Provides a consistent interface for error handling across the package.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DatabaseException(VetSchedulingException):
    """Raised when the storage layer fails; the current request is aborted."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize database exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
            original_error: Original exception that caused this error
        """
        super().__init__(message, error_code or "DATABASE_ERROR", details)
        self.original_error = original_error

        if original_error and "original_error" not in self.details:
            self.details["original_error"] = str(original_error)


class TransactionException(DatabaseException):
    """Exception raised when database transaction fails."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize transaction exception.

        Args:
            message: Error message
            operation: Description of the failed operation
            original_error: Original exception
        """
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="DATABASE_TRANSACTION_ERROR",
            details=details,
            original_error=original_error,
        )


class ValidationException(VetSchedulingException):
    """Base exception for data validation errors."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class InvalidRangeException(ValidationException):
    """Raised when a proposed time range does not start before it ends."""

    def __init__(
        self,
        message: str = "End time must be after start time",
        start: Optional[Any] = None,
        end: Optional[Any] = None,
    ):
        super().__init__(message=message)
        self.error_code = "INVALID_RANGE"
        if start is not None:
            self.details["start"] = str(start)
        if end is not None:
            self.details["end"] = str(end)


class BusinessRuleException(ValidationException):
    """Exception raised when business rule validation fails."""

    def __init__(
        self,
        message: str = "Business rule validation failed",
        rule_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize business rule exception.

        Args:
            message: Error message
            rule_name: Name of the business rule that failed
            context: Additional context about the failure
        """
        details: Dict[str, Any] = {}
        if rule_name:
            details["rule_name"] = rule_name
        if context:
            details["context"] = context

        super().__init__(message=message)
        self.error_code = "BUSINESS_RULE_ERROR"
        if details:
            self.details.update(details)


class InvalidStatusTransitionException(BusinessRuleException):
    """Raised when an appointment status change is not an allowed lifecycle edge."""

    def __init__(self, current_status: str, target_status: str):
        super().__init__(
            message=(
                f"Cannot change appointment status from {current_status} "
                f"to {target_status}"
            ),
            rule_name="appointment_lifecycle",
            context={"current_status": current_status, "target_status": target_status},
        )
        self.error_code = "INVALID_STATUS_TRANSITION"
        self.current_status = current_status
        self.target_status = target_status


class NotFoundException(VetSchedulingException):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str = "Resource not found",
        resource: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ):
        details: Dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if resource_id is not None:
            details["resource_id"] = str(resource_id)

        super().__init__(message=message, error_code="NOT_FOUND", details=details)


class AuthenticationException(VetSchedulingException):
    """Raised when a request carries no valid bearer token."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, error_code="AUTHENTICATION_ERROR")


class AuthorizationException(VetSchedulingException):
    """Raised when the caller's role or membership does not permit the action."""

    status_code = 403

    def __init__(
        self,
        message: str = "Insufficient permissions",
        required_roles: Optional[List[str]] = None,
    ):
        details: Dict[str, Any] = {}
        if required_roles:
            details["required_roles"] = required_roles

        super().__init__(
            message=message, error_code="AUTHORIZATION_ERROR", details=details
        )


class SchedulingConflictException(VetSchedulingException):
    """Raised when a proposed appointment overlaps an existing one for the vet."""

    status_code = 409

    def __init__(
        self,
        message: str = "Time slot conflict",
        description: str = "You already have an appointment during this time range.",
        vet_id: Optional[Any] = None,
        clinic_id: Optional[Any] = None,
    ):
        details: Dict[str, Any] = {}
        if vet_id is not None:
            details["vet_id"] = str(vet_id)
        if clinic_id is not None:
            details["clinic_id"] = str(clinic_id)

        super().__init__(
            message=message, error_code="SCHEDULING_CONFLICT", details=details
        )
        self.description = description


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field names to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        # Drop the leading "body"/"query" location FastAPI adds
        location = [
            str(loc)
            for loc in error.get("loc", [])
            if loc not in ("body", "query", "path")
        ]
        field_path = ".".join(location) or "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "This field is required"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(exception: VetSchedulingException) -> Dict[str, Any]:
    """
    Create the client-facing error body for an exception.

    Clients only ever see the message; conflicts add a human description.

    Args:
        exception: The exception to format

    Returns:
        Error response dictionary
    """
    response: Dict[str, Any] = {"error": exception.message}

    if isinstance(exception, SchedulingConflictException):
        response["message"] = exception.description

    return response


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, VetSchedulingException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unhandled exception: {str(exception)}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
        )
