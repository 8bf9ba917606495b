"""
Authentication and authorization dependencies for FastAPI
"""

from fastapi import Depends
from fastapi.security import APIKeyHeader, HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Callable, Coroutine, Any, Iterable, Optional

from app.core.access_control import authorize
from app.core.api_key import ApiClient, authenticate_api_key
from app.core.clinic_state import ClinicStore, SQLClinicStore
from app.core.database import get_session
from app.core.permissions import Operation, get_roles_for_operation
from app.core.principal import Principal
from app.core.user_state import SQLUserStore, UserStore
from app.models.user import UserRole

# auto_error=False so a missing header goes through the same
# UnauthenticatedError path as a bad token
security = HTTPBearer(auto_error=False)
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def get_clinic_store(session: AsyncSession = Depends(get_session)) -> ClinicStore:
    """Clinic state store bound to the request's session"""
    return SQLClinicStore(session)


async def get_user_store(session: AsyncSession = Depends(get_session)) -> UserStore:
    """Account state store bound to the request's session"""
    return SQLUserStore(session)


def protect(
    operation: Operation,
    permitted_roles: Optional[Iterable[UserRole]] = None,
) -> Callable[..., Coroutine[Any, Any, Principal]]:
    """
    Dependency factory guarding an endpoint.

    Roles default to the operation's declaration in OPERATION_ROLES. The
    resolved Principal is returned to the endpoint, which must take the
    clinic id from it rather than from request parameters.
    """
    if permitted_roles is None:
        roles = get_roles_for_operation(operation)
    else:
        roles = frozenset(permitted_roles)

    async def require_access(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        store: ClinicStore = Depends(get_clinic_store),
        users: UserStore = Depends(get_user_store),
    ) -> Principal:
        token = credentials.credentials if credentials else None
        return await authorize(operation, roles, token, store, users=users)

    return require_access


async def require_api_key(
    api_key: Optional[str] = Depends(api_key_header),
    session: AsyncSession = Depends(get_session),
    store: ClinicStore = Depends(get_clinic_store),
) -> ApiClient:
    """Dependency for integration endpoints authenticated by X-API-Key"""
    return await authenticate_api_key(api_key, session, store)
