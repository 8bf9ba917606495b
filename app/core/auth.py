"""
JWT Authentication utilities
"""

from datetime import timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from typing import Any, Dict, Optional
import uuid

from app.core.config import get_settings
from app.core.exceptions import InvalidCredentialError
from app.models.base import utc_now
from app.models.user import UserRole

settings = get_settings()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(
    user_id: uuid.UUID,
    role: UserRole,
    clinic_id: Optional[uuid.UUID] = None,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token with user claims"""
    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "role": UserRole(role).value,
        "clinic_id": str(clinic_id) if clinic_id else None,
        "email": email,
        "exp": expire,
        "iat": utc_now(),
    }

    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def decode_access_token(token: Optional[str]) -> Dict[str, Any]:
    """Decode and validate JWT token; raises InvalidCredentialError"""
    if not token:
        raise InvalidCredentialError("Missing bearer token")
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidCredentialError(str(e)) from e
