"""
RBAC (Role-Based Access Control) for protected operations
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable

from app.core.principal import Principal
from app.core.exceptions import AccessDecision, DenialReason
from app.models.user import UserRole


class Operation(str, Enum):
    """Protected operation definitions"""
    # Clinic administration
    CLINIC_LIST = "clinic:list"
    CLINIC_VIEW = "clinic:view"
    CLINIC_CREATE = "clinic:create"
    CLINIC_UPDATE_SUBSCRIPTION = "clinic:update_subscription"
    CLINIC_DEACTIVATE = "clinic:deactivate"
    CLINIC_REGENERATE_API_KEY = "clinic:regenerate_api_key"

    # Patients
    PATIENT_LIST = "patient:list"
    PATIENT_VIEW = "patient:view"
    PATIENT_CREATE = "patient:create"
    PATIENT_UPDATE = "patient:update"
    PATIENT_DELETE = "patient:delete"
    PATIENT_LIST_OWN = "patient:list_own"

    # Clinic staff accounts
    USER_LIST = "user:list"
    USER_VIEW = "user:view"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    DOCTOR_LIST = "user:list_doctors"

    # Account
    CURRENT_USER_VIEW = "user:view_self"


ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)
CLINIC_STAFF: FrozenSet[UserRole] = frozenset({
    UserRole.CLINIC_ADMIN,
    UserRole.SECRETARY,
    UserRole.DOCTOR,
})


# Operation role mapping, fixed at import time
OPERATION_ROLES: Dict[Operation, FrozenSet[UserRole]] = {
    # Platform-level clinic management is super admin only
    Operation.CLINIC_LIST: frozenset({UserRole.SUPER_ADMIN}),
    Operation.CLINIC_VIEW: frozenset({UserRole.SUPER_ADMIN}),
    Operation.CLINIC_CREATE: frozenset({UserRole.SUPER_ADMIN}),
    Operation.CLINIC_UPDATE_SUBSCRIPTION: frozenset({UserRole.SUPER_ADMIN}),
    Operation.CLINIC_DEACTIVATE: frozenset({UserRole.SUPER_ADMIN}),
    Operation.CLINIC_REGENERATE_API_KEY: frozenset({UserRole.SUPER_ADMIN, UserRole.CLINIC_ADMIN}),

    # Every clinic staff member can read patients
    Operation.PATIENT_LIST: CLINIC_STAFF,
    Operation.PATIENT_VIEW: CLINIC_STAFF,
    # Doctors cannot create or edit demographic records
    Operation.PATIENT_CREATE: frozenset({UserRole.CLINIC_ADMIN, UserRole.SECRETARY}),
    Operation.PATIENT_UPDATE: frozenset({UserRole.CLINIC_ADMIN, UserRole.SECRETARY}),
    Operation.PATIENT_DELETE: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.PATIENT_LIST_OWN: frozenset({UserRole.DOCTOR}),

    # Staff management stays inside the admin's clinic
    Operation.USER_LIST: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.USER_VIEW: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.USER_CREATE: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.USER_UPDATE: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.USER_DELETE: frozenset({UserRole.CLINIC_ADMIN}),
    Operation.DOCTOR_LIST: frozenset({UserRole.CLINIC_ADMIN, UserRole.SECRETARY}),

    Operation.CURRENT_USER_VIEW: ALL_ROLES,
}


def get_roles_for_operation(operation: Operation) -> FrozenSet[UserRole]:
    """Get permitted roles for an operation; undeclared operations permit nobody"""
    return OPERATION_ROLES.get(operation, frozenset())


def has_role(principal: Principal, permitted_roles: Iterable[UserRole]) -> bool:
    """Check if the principal's role is in the permitted set"""
    return principal.role in frozenset(permitted_roles)


def check_role(principal: Principal, permitted_roles: Iterable[UserRole]) -> AccessDecision:
    """Role authorization check; an empty permitted set always denies"""
    if not has_role(principal, permitted_roles):
        return AccessDecision.deny(DenialReason.ROLE_NOT_PERMITTED)
    return AccessDecision.allow()
