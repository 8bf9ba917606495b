"""
API-key authentication for external integrations (booking bots, automation)

A key identifies a clinic, not a user. The clinic passes the same gate as
user requests, then the key's expiry and the clinic's plan are checked.
"""

from dataclasses import dataclass
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from app.core.clinic_state import ClinicStore
from app.core.exceptions import (
    AccessDeniedError,
    ClinicLookupFailedError,
    PlanNotEligibleError,
    UnauthenticatedError,
    exception_for,
)
from app.core.tenant_guard import check_clinic
from app.models.base import as_utc, utc_now
from app.models.clinic import Clinic, INTEGRATION_PLANS, SubscriptionPlan

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ApiClient:
    """Clinic context of a request authenticated by API key"""
    clinic_id: str
    clinic_name: str
    subscription_plan: SubscriptionPlan


def _deny(error: AccessDeniedError, clinic_id: Optional[str] = None) -> AccessDeniedError:
    logger.warning("api_key_denied", reason_code=error.reason_code.value, detail=error.message, clinic_id=clinic_id)
    return error


async def authenticate_api_key(
    api_key: Optional[str],
    session: AsyncSession,
    store: ClinicStore,
) -> ApiClient:
    """Resolve an X-API-Key value to its clinic or raise an AccessDeniedError"""
    if not api_key:
        raise _deny(UnauthenticatedError("API key not provided"))

    try:
        result = await session.exec(
            select(Clinic.id, Clinic.name, Clinic.subscription_plan, Clinic.api_key_expires_at)
            .where(Clinic.api_key == api_key)
        )
        row = result.first()
    except Exception as e:
        logger.error("api_key_lookup_failed", error=str(e), exc_info=True)
        raise _deny(ClinicLookupFailedError())

    if row is None:
        raise _deny(UnauthenticatedError("Invalid API key"))

    clinic_uuid, clinic_name, plan, expires_at = row
    clinic_id = str(clinic_uuid)

    decision = await check_clinic(clinic_id, store)
    if not decision.allowed:
        raise _deny(exception_for(decision.reason_code)(), clinic_id)

    if expires_at is not None and as_utc(expires_at) < utc_now():
        raise _deny(UnauthenticatedError("API key expired"), clinic_id)

    plan = SubscriptionPlan(plan)
    if plan not in INTEGRATION_PLANS:
        raise _deny(PlanNotEligibleError(), clinic_id)

    return ApiClient(clinic_id=clinic_id, clinic_name=clinic_name, subscription_plan=plan)
