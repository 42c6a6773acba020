"""
Database connection and session management.

This module provides async SQLAlchemy engine configuration and session
management for the appointment scheduling service.
"""

from .connection import (
    check_connection,
    close_engine,
    create_engine,
    create_engine_from_settings,
)
from .session import SessionManager

__all__ = [
    # Connection utilities
    "create_engine",
    "create_engine_from_settings",
    "check_connection",
    "close_engine",
    # Session management
    "SessionManager",
]
