"""
Tests for bearer token creation and verification.
"""

import uuid

import jwt
import pytest

from vet_scheduling.api import (
    Principal,
    PrincipalType,
    create_access_token,
    decode_access_token,
)
from vet_scheduling.exceptions import AuthenticationException

SECRET = "unit-test-secret"


class TestAccessTokens:
    """Test cases for create_access_token and decode_access_token."""

    @pytest.mark.parametrize("principal_type", list(PrincipalType))
    def test_round_trip(self, principal_type):
        subject = uuid.uuid4()

        principal = decode_access_token(
            create_access_token(subject, principal_type, SECRET), SECRET
        )

        assert principal == Principal(id=subject, type=principal_type)

    def test_principal_kinds(self):
        vet = Principal(id=uuid.uuid4(), type=PrincipalType.VET)
        owner = Principal(id=uuid.uuid4(), type=PrincipalType.USER)

        assert vet.is_vet and not vet.is_owner
        assert owner.is_owner and not owner.is_vet

    def test_wrong_secret(self):
        token = create_access_token(uuid.uuid4(), PrincipalType.VET, SECRET)

        with pytest.raises(AuthenticationException) as exc_info:
            decode_access_token(token, "another-secret")

        assert exc_info.value.message == "Invalid token"
        assert exc_info.value.status_code == 401

    def test_expired_token(self):
        token = create_access_token(
            uuid.uuid4(), PrincipalType.VET, SECRET, expires_minutes=-5
        )

        with pytest.raises(AuthenticationException):
            decode_access_token(token, SECRET)

    @pytest.mark.parametrize(
        "claims",
        [
            {"sub": "not-a-uuid", "type": "vet"},
            {"sub": str(uuid.uuid4()), "type": "admin"},
            {"type": "vet"},
        ],
    )
    def test_bad_claims(self, claims):
        token = jwt.encode(claims, SECRET, algorithm="HS256")

        with pytest.raises(AuthenticationException) as exc_info:
            decode_access_token(token, SECRET)

        assert exc_info.value.message == "Invalid token subject"
