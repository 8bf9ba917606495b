"""
Integration API endpoints for external bots, authenticated by X-API-Key
"""

from fastapi import APIRouter, Depends
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List
import structlog
import uuid

from app.core.api_key import ApiClient
from app.core.database import get_session
from app.core.dependencies import require_api_key
from app.models.user import User, UserRole
from app.schemas.integration import IntegrationConfigResponse
from app.schemas.user import DoctorSummary

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/config", response_model=IntegrationConfigResponse)
async def get_integration_config(client: ApiClient = Depends(require_api_key)):
    """Clinic context the integration is bound to"""
    return IntegrationConfigResponse(
        clinic_id=client.clinic_id,
        clinic_name=client.clinic_name,
        subscription_plan=client.subscription_plan,
    )


@router.get("/doctors", response_model=List[DoctorSummary])
async def list_integration_doctors(
    client: ApiClient = Depends(require_api_key),
    session: AsyncSession = Depends(get_session)
):
    """Active doctors of the key's clinic"""
    result = await session.exec(
        select(User).where(
            User.clinic_id == uuid.UUID(client.clinic_id),
            User.role == UserRole.DOCTOR,
            User.is_active == True,  # noqa: E712
        ).order_by(User.last_name, User.first_name)
    )
    doctors = result.all()
    logger.debug("integration_doctors_listed", clinic_id=client.clinic_id, count=len(doctors))
    return doctors
