"""
Principal resolution from a verified token payload
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from app.core.exceptions import UnauthenticatedError
from app.models.user import UserRole
from app.schemas.token import TokenPayload


@dataclass(frozen=True)
class Principal:
    """Authenticated identity for the duration of one request"""
    user_id: str
    role: UserRole
    clinic_id: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN


def resolve_principal(payload: Optional[Mapping[str, Any]]) -> Principal:
    """
    Build a Principal from an already verified token payload.

    Signature and expiry are the credential verifier's job; this only
    validates the claims against TokenPayload. A payload with an unknown
    role is rejected rather than mapped to some default role.
    """
    if not isinstance(payload, Mapping):
        raise UnauthenticatedError()

    try:
        claims = TokenPayload.model_validate(dict(payload))
    except ValidationError:
        raise UnauthenticatedError()

    return Principal(
        user_id=claims.sub,
        role=claims.role,
        clinic_id=claims.clinic_id or None,
        email=claims.email or None,
    )
