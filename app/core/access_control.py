"""
Access-control chain: credential -> principal -> account -> tenant check -> role check

The order is fixed. An unauthenticated or tenant-invalid principal never
reaches role evaluation, and the first failure short-circuits the chain.
"""

from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, TypeVar

import structlog

from app.core.auth import decode_access_token
from app.core.clinic_state import ClinicStore
from app.core.exceptions import (
    AccessDecision,
    AccessDeniedError,
    InvalidCredentialError,
    UnauthenticatedError,
    exception_for,
)
from app.core.permissions import Operation, check_role
from app.core.principal import Principal, resolve_principal
from app.core.tenant_guard import check_tenant_access
from app.core.user_state import UserStore
from app.models.user import UserRole

logger = structlog.get_logger(__name__)

T = TypeVar("T")
CredentialVerifier = Callable[[Optional[str]], Mapping[str, Any]]


async def evaluate_access(
    principal: Principal,
    store: ClinicStore,
    permitted_roles: Iterable[UserRole],
) -> AccessDecision:
    """Run the tenant check, then the role check"""
    decision = await check_tenant_access(principal, store)
    if not decision.allowed:
        return decision
    return check_role(principal, permitted_roles)


def _log_denial(operation: Operation, error: AccessDeniedError, principal: Optional[Principal] = None) -> None:
    logger.warning(
        "access_denied",
        operation=operation.value,
        reason_code=error.reason_code.value,
        user_id=principal.user_id if principal else None,
        clinic_id=principal.clinic_id if principal else None,
    )


async def authorize(
    operation: Operation,
    permitted_roles: Iterable[UserRole],
    token: Optional[str],
    store: ClinicStore,
    verify: CredentialVerifier = decode_access_token,
    users: Optional[UserStore] = None,
) -> Principal:
    """
    Authenticate and authorize one request.

    When ``users`` is given, the account behind the token must still exist
    and be active. Returns the resolved Principal, or raises the
    AccessDeniedError subclass matching the first failing check.
    """
    try:
        payload = verify(token)
        principal = resolve_principal(payload)
    except (InvalidCredentialError, UnauthenticatedError):
        error = UnauthenticatedError()
        _log_denial(operation, error)
        raise error

    if users is not None and not await users.is_active_user(principal.user_id):
        error = UnauthenticatedError("User account is inactive or no longer exists")
        _log_denial(operation, error, principal)
        raise error

    decision = await evaluate_access(principal, store, permitted_roles)
    if not decision.allowed:
        error = exception_for(decision.reason_code)()
        _log_denial(operation, error, principal)
        raise error

    logger.debug(
        "access_granted",
        operation=operation.value,
        user_id=principal.user_id,
        role=principal.role.value,
    )
    return principal


def with_access_control(
    operation: Operation,
    permitted_roles: Iterable[UserRole],
    handler: Callable[..., Awaitable[T]],
    verify: CredentialVerifier = decode_access_token,
) -> Callable[..., Awaitable[T]]:
    """
    Wrap ``handler`` so it only runs for an authorized principal.

    The wrapped callable takes ``(token, store, *args, **kwargs)`` and calls
    ``handler(principal, *args, **kwargs)``. Roles are frozen here, at
    registration time.
    """
    roles = frozenset(permitted_roles)

    @wraps(handler)
    async def guarded(token: Optional[str], store: ClinicStore, *args: Any, **kwargs: Any) -> T:
        principal = await authorize(operation, roles, token, store, verify=verify)
        return await handler(principal, *args, **kwargs)

    return guarded
