"""
Clinic state lookup for the tenant isolation check
"""

from dataclasses import dataclass
from typing import Protocol
import uuid

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from app.core.exceptions import ClinicNotFoundError
from app.models.clinic import Clinic, SubscriptionStatus, INACTIVE_SUBSCRIPTION_STATUSES

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClinicState:
    """The only clinic fields the access-control layer is allowed to see"""
    clinic_id: str
    is_active: bool
    subscription_status: SubscriptionStatus

    @property
    def subscription_inactive(self) -> bool:
        return self.subscription_status in INACTIVE_SUBSCRIPTION_STATUSES


class ClinicStore(Protocol):
    async def get_clinic_state(self, clinic_id: str) -> ClinicState:
        """Return the clinic's activation state or raise ClinicNotFoundError"""
        ...


class SQLClinicStore:
    """Reads clinic state from the database, one query per call and no caching"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_clinic_state(self, clinic_id: str) -> ClinicState:
        try:
            clinic_uuid = uuid.UUID(str(clinic_id))
        except ValueError:
            raise ClinicNotFoundError()

        result = await self.session.exec(
            select(Clinic.is_active, Clinic.subscription_status).where(Clinic.id == clinic_uuid)
        )
        row = result.first()
        if row is None:
            logger.debug("clinic_state_not_found", clinic_id=clinic_id)
            raise ClinicNotFoundError()

        is_active, subscription_status = row
        return ClinicState(
            clinic_id=str(clinic_uuid),
            is_active=is_active,
            subscription_status=SubscriptionStatus(subscription_status),
        )
