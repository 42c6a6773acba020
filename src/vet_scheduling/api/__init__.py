"""
HTTP interface for the scheduling service.
"""

from .app import create_app, main
from .security import Principal, PrincipalType, create_access_token, decode_access_token

__all__ = [
    "create_app",
    "main",
    "Principal",
    "PrincipalType",
    "create_access_token",
    "decode_access_token",
]
