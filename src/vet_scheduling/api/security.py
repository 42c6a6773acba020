"""
Bearer token handling.

Tokens are HS256 JWTs (PyJWT) carrying the principal id in ``sub`` and the
principal kind in ``type``: ``"vet"`` for veterinarians, ``"user"`` for pet
owners.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from ..exceptions import AuthenticationException

DEFAULT_EXPIRES_MINUTES = 60


class PrincipalType(str, enum.Enum):
    VET = "vet"
    USER = "user"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""

    id: uuid.UUID
    type: PrincipalType

    @property
    def is_vet(self) -> bool:
        return self.type == PrincipalType.VET

    @property
    def is_owner(self) -> bool:
        return self.type == PrincipalType.USER


def create_access_token(
    subject: uuid.UUID,
    principal_type: PrincipalType,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: Optional[int] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or DEFAULT_EXPIRES_MINUTES)
    payload = {
        "sub": str(subject),
        "type": PrincipalType(principal_type).value,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Principal:
    """
    Verify a token and extract the principal.

    Raises:
        AuthenticationException: If the signature, expiry or claims are invalid
    """
    try:
        payload: Dict[str, Any] = jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.InvalidTokenError as exc:
        raise AuthenticationException("Invalid token") from exc

    try:
        principal_id = uuid.UUID(str(payload.get("sub")))
        principal_type = PrincipalType(payload.get("type"))
    except ValueError as exc:
        raise AuthenticationException("Invalid token subject") from exc

    return Principal(id=principal_id, type=principal_type)
