"""
FastAPI dependencies: settings, database sessions and the caller's identity.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import SessionManager
from ..exceptions import AuthenticationException, AuthorizationException
from ..utils.config import SchedulingSettings
from .security import Principal, PrincipalType, decode_access_token

# auto_error=False so a missing header is reported as 401 by our own handler
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> SchedulingSettings:
    return request.app.state.settings


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


async def get_db_session(
    session_manager: SessionManager = Depends(get_session_manager),
) -> AsyncGenerator[AsyncSession, None]:
    """One session per request; rolled back if the handler fails."""
    async with session_manager.get_session() as session:
        yield session


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: SchedulingSettings = Depends(get_settings),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Authentication required")
    return decode_access_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )


def require_principal(*allowed_types: PrincipalType):
    """Create a dependency that admits only the given principal types."""

    async def principal_checker(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if principal.type not in allowed_types:
            raise AuthorizationException(
                "Access denied for this account type",
                required_roles=[t.value for t in allowed_types],
            )
        return principal

    return principal_checker


require_vet = require_principal(PrincipalType.VET)
require_owner = require_principal(PrincipalType.USER)
require_owner_or_vet = require_principal(PrincipalType.USER, PrincipalType.VET)
