"""
Access-control error taxonomy

Every denial carries a machine-readable ``reason_code``. Clients branch on
the code; ``message`` is only for display.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type

from fastapi import status


class DenialReason(str, Enum):
    """Reasons an access-control check can reject a request"""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NO_CLINIC_ASSIGNED = "NO_CLINIC_ASSIGNED"
    CLINIC_NOT_FOUND = "CLINIC_NOT_FOUND"
    CLINIC_DEACTIVATED = "CLINIC_DEACTIVATED"
    SUBSCRIPTION_INACTIVE = "SUBSCRIPTION_INACTIVE"
    CLINIC_LOOKUP_FAILED = "CLINIC_LOOKUP_FAILED"
    ROLE_NOT_PERMITTED = "ROLE_NOT_PERMITTED"
    PLAN_NOT_ELIGIBLE = "PLAN_NOT_ELIGIBLE"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access-control check; reason_code is set only on denial"""
    allowed: bool
    reason_code: Optional[DenialReason] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AccessDecision":
        return cls(allowed=False, reason_code=reason)


class InvalidCredentialError(Exception):
    """Raised by the credential verifier for a bad, expired or malformed token"""


class AccessDeniedError(Exception):
    """Base class for every access-control rejection"""

    reason_code: DenialReason
    status_code: int = status.HTTP_403_FORBIDDEN
    default_message: str = "Forbidden"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return {"detail": self.message, "reason_code": self.reason_code.value}


class UnauthenticatedError(AccessDeniedError):
    reason_code = DenialReason.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class NoClinicAssignedError(AccessDeniedError):
    reason_code = DenialReason.NO_CLINIC_ASSIGNED
    default_message = "User is not assigned to any clinic"


class ClinicNotFoundError(AccessDeniedError):
    """Surfaced as forbidden so clinic existence is never confirmed"""
    reason_code = DenialReason.CLINIC_NOT_FOUND
    default_message = "Clinic not found"


class ClinicDeactivatedError(AccessDeniedError):
    reason_code = DenialReason.CLINIC_DEACTIVATED
    default_message = "The clinic is deactivated"


class SubscriptionInactiveError(AccessDeniedError):
    reason_code = DenialReason.SUBSCRIPTION_INACTIVE
    default_message = "The clinic subscription is not active"


class ClinicLookupFailedError(AccessDeniedError):
    reason_code = DenialReason.CLINIC_LOOKUP_FAILED
    default_message = "Clinic state could not be verified"


class RoleNotPermittedError(AccessDeniedError):
    reason_code = DenialReason.ROLE_NOT_PERMITTED
    default_message = "Role not permitted for this operation"


class PlanNotEligibleError(AccessDeniedError):
    reason_code = DenialReason.PLAN_NOT_ELIGIBLE
    default_message = "The clinic plan does not include integration access"


_EXCEPTIONS_BY_REASON: Dict[DenialReason, Type[AccessDeniedError]] = {
    cls.reason_code: cls
    for cls in (
        UnauthenticatedError,
        NoClinicAssignedError,
        ClinicNotFoundError,
        ClinicDeactivatedError,
        SubscriptionInactiveError,
        ClinicLookupFailedError,
        RoleNotPermittedError,
        PlanNotEligibleError,
    )
}


def exception_for(reason: DenialReason) -> Type[AccessDeniedError]:
    """Map a denial reason to the exception class that surfaces it"""
    return _EXCEPTIONS_BY_REASON[reason]
