"""
Tenant isolation check for multi-tenant access

The clinic id always comes from the verified principal, never from request
parameters. This is a gate: it authorizes or rejects the request and leaves
query scoping to the handlers.
"""

import structlog

from app.core.clinic_state import ClinicStore
from app.core.exceptions import AccessDecision, ClinicNotFoundError, DenialReason
from app.core.principal import Principal

logger = structlog.get_logger(__name__)


async def check_clinic(clinic_id: str, store: ClinicStore) -> AccessDecision:
    """Clinic gate shared by user tokens and integration API keys"""
    try:
        clinic = await store.get_clinic_state(clinic_id)
    except ClinicNotFoundError:
        return AccessDecision.deny(DenialReason.CLINIC_NOT_FOUND)
    except Exception as e:
        # Fail closed: a lookup error never grants access
        logger.error(
            "clinic_state_lookup_failed",
            clinic_id=clinic_id,
            error=str(e),
            exc_info=True,
        )
        return AccessDecision.deny(DenialReason.CLINIC_LOOKUP_FAILED)

    if not clinic.is_active:
        return AccessDecision.deny(DenialReason.CLINIC_DEACTIVATED)

    if clinic.subscription_inactive:
        return AccessDecision.deny(DenialReason.SUBSCRIPTION_INACTIVE)

    return AccessDecision.allow()


async def check_tenant_access(principal: Principal, store: ClinicStore) -> AccessDecision:
    """Decide whether the principal may act against its clinic's data"""
    # Super admins operate across clinics
    if principal.is_super_admin:
        return AccessDecision.allow()

    if not principal.clinic_id:
        return AccessDecision.deny(DenialReason.NO_CLINIC_ASSIGNED)

    return await check_clinic(principal.clinic_id, store)
