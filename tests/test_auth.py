"""
Unit test for JWT authentication
"""

import pytest
from datetime import timedelta
import uuid
from jose import jwt

from app.core.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.core.config import get_settings
from app.core.exceptions import InvalidCredentialError
from app.core.principal import resolve_principal
from app.models.user import UserRole

settings = get_settings()


def test_create_access_token():
    """Test JWT token creation"""
    user_id = uuid.uuid4()
    clinic_id = uuid.uuid4()

    token = create_access_token(
        user_id=user_id,
        role=UserRole.SECRETARY,
        clinic_id=clinic_id,
        email="front@example.com",
        expires_delta=timedelta(hours=24),
    )

    assert isinstance(token, str)

    payload = decode_access_token(token)
    assert payload["sub"] == str(user_id)
    assert payload["clinic_id"] == str(clinic_id)
    assert payload["role"] == "SECRETARY"
    assert payload["email"] == "front@example.com"
    assert "exp" in payload
    assert "iat" in payload


def test_super_admin_token_has_no_clinic():
    token = create_access_token(user_id=uuid.uuid4(), role=UserRole.SUPER_ADMIN)

    payload = decode_access_token(token)

    assert payload["clinic_id"] is None
    assert resolve_principal(payload).is_super_admin


def test_decoded_token_resolves_to_principal():
    user_id = uuid.uuid4()
    clinic_id = uuid.uuid4()
    token = create_access_token(user_id=user_id, role=UserRole.DOCTOR, clinic_id=clinic_id)

    principal = resolve_principal(decode_access_token(token))

    assert principal.user_id == str(user_id)
    assert principal.clinic_id == str(clinic_id)
    assert principal.role == UserRole.DOCTOR


@pytest.mark.parametrize("token", [None, "", "invalid.token.string.here", "not-a-jwt"])
def test_invalid_token_rejected(token):
    """Test token verification with invalid token"""
    with pytest.raises(InvalidCredentialError):
        decode_access_token(token)


def test_expired_token():
    """Test that expired tokens are rejected"""
    token = create_access_token(
        user_id=uuid.uuid4(),
        role=UserRole.DOCTOR,
        clinic_id=uuid.uuid4(),
        expires_delta=timedelta(hours=-1),
    )

    with pytest.raises(InvalidCredentialError):
        decode_access_token(token)


def test_token_signed_with_other_key_rejected():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "role": "SUPER_ADMIN", "clinic_id": None},
        "some-other-secret",
        algorithm=settings.JWT_ALGORITHM,
    )

    with pytest.raises(InvalidCredentialError):
        decode_access_token(token)


def test_password_hashing():
    password_hash = hash_password("correct horse battery staple")

    assert password_hash != "correct horse battery staple"
    assert verify_password("correct horse battery staple", password_hash)
    assert not verify_password("wrong password", password_hash)
