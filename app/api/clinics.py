"""
Clinic administration API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import IntegrityError
from typing import List
from datetime import timedelta
import structlog
import uuid

from app.core.config import get_settings
from app.core.database import get_session
from app.core.dependencies import protect
from app.core.permissions import Operation
from app.core.principal import Principal
from app.models.base import utc_now
from app.models.clinic import Clinic, SubscriptionStatus
from app.schemas.clinic import ApiKeyResponse, ClinicCreate, ClinicResponse, SubscriptionUpdate

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


def generate_api_key() -> str:
    return f"mt_{uuid.uuid4().hex}"


async def _get_clinic_or_404(clinic_id: uuid.UUID, session: AsyncSession) -> Clinic:
    clinic = await session.get(Clinic, clinic_id)
    if not clinic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Clinic not found"
        )
    return clinic


@router.get("/", response_model=List[ClinicResponse])
async def list_clinics(
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(protect(Operation.CLINIC_LIST)),
    session: AsyncSession = Depends(get_session)
):
    """List all clinics"""
    result = await session.exec(
        select(Clinic).order_by(Clinic.created_at.desc()).offset(skip).limit(limit)
    )
    return result.all()


@router.get("/{clinic_id}", response_model=ClinicResponse)
async def get_clinic(
    clinic_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.CLINIC_VIEW)),
    session: AsyncSession = Depends(get_session)
):
    """Get clinic by ID"""
    return await _get_clinic_or_404(clinic_id, session)


@router.post("/", response_model=ClinicResponse, status_code=status.HTTP_201_CREATED)
async def create_clinic(
    clinic_data: ClinicCreate,
    principal: Principal = Depends(protect(Operation.CLINIC_CREATE)),
    session: AsyncSession = Depends(get_session)
):
    """Create a new clinic on a trial subscription"""
    now = utc_now()
    clinic = Clinic(
        name=clinic_data.name,
        slug=clinic_data.slug,
        email=clinic_data.email.lower(),
        phone=clinic_data.phone,
        subscription_status=SubscriptionStatus.TRIAL,
        subscription_plan=clinic_data.subscription_plan,
        trial_ends_at=now + timedelta(days=settings.TRIAL_DAYS),
        api_key=generate_api_key(),
        api_key_expires_at=now + timedelta(days=settings.API_KEY_VALIDITY_DAYS),
        is_active=True,
    )
    try:
        session.add(clinic)
        await session.commit()
        await session.refresh(clinic)
    except IntegrityError:
        await session.rollback()
        logger.warning("clinic_create_conflict", slug=clinic_data.slug)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A clinic with this slug already exists"
        )

    logger.info("clinic_created", clinic_id=str(clinic.id), created_by=principal.user_id)
    return clinic


@router.patch("/{clinic_id}/subscription", response_model=ClinicResponse)
async def update_subscription(
    clinic_id: uuid.UUID,
    update: SubscriptionUpdate,
    principal: Principal = Depends(protect(Operation.CLINIC_UPDATE_SUBSCRIPTION)),
    session: AsyncSession = Depends(get_session)
):
    """Update clinic subscription"""
    clinic = await _get_clinic_or_404(clinic_id, session)

    clinic.subscription_status = update.status
    if update.plan is not None:
        clinic.subscription_plan = update.plan
    if update.status == SubscriptionStatus.ACTIVE:
        clinic.subscription_ends_at = utc_now() + timedelta(days=settings.SUBSCRIPTION_PERIOD_DAYS)

    clinic.updated_at = utc_now()
    session.add(clinic)
    await session.commit()
    await session.refresh(clinic)
    logger.info(
        "clinic_subscription_updated",
        clinic_id=str(clinic_id),
        status=update.status.value,
        updated_by=principal.user_id,
    )
    return clinic


@router.patch("/{clinic_id}/deactivate", response_model=ClinicResponse)
async def deactivate_clinic(
    clinic_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.CLINIC_DEACTIVATE)),
    session: AsyncSession = Depends(get_session)
):
    """Deactivate clinic; takes effect on the clinic's next request"""
    clinic = await _get_clinic_or_404(clinic_id, session)

    clinic.is_active = False
    clinic.subscription_status = SubscriptionStatus.SUSPENDED
    clinic.updated_at = utc_now()
    session.add(clinic)
    await session.commit()
    await session.refresh(clinic)
    logger.info("clinic_deactivated", clinic_id=str(clinic_id), deactivated_by=principal.user_id)
    return clinic


@router.post("/{clinic_id}/api-key", response_model=ApiKeyResponse)
async def regenerate_api_key(
    clinic_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.CLINIC_REGENERATE_API_KEY)),
    session: AsyncSession = Depends(get_session)
):
    """Regenerate the clinic's integration API key"""
    # Clinic admins may only rotate their own clinic's key
    if not principal.is_super_admin and principal.clinic_id != str(clinic_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this clinic"
        )

    clinic = await _get_clinic_or_404(clinic_id, session)
    clinic.api_key = generate_api_key()
    clinic.api_key_expires_at = utc_now() + timedelta(days=settings.API_KEY_VALIDITY_DAYS)
    clinic.updated_at = utc_now()
    session.add(clinic)
    await session.commit()

    logger.info("clinic_api_key_regenerated", clinic_id=str(clinic_id), user_id=principal.user_id)
    return ApiKeyResponse(api_key=clinic.api_key, api_key_expires_at=clinic.api_key_expires_at)
