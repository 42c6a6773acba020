"""
Custom exceptions for the vet scheduling package.

This module defines the exception hierarchy and custom exceptions
used throughout the appointment scheduling service.
"""

from .core_exceptions import (  # Utility functions
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

__all__ = [
    # Exception classes
    "VetSchedulingException",
    "DatabaseException",
    "TransactionException",
    "ValidationException",
    "InvalidRangeException",
    "BusinessRuleException",
    "InvalidStatusTransitionException",
    "NotFoundException",
    "AuthenticationException",
    "AuthorizationException",
    "SchedulingConflictException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
    "log_exception_context",
]
