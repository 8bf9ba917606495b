"""
Clinic staff management API endpoints

Every query is scoped by the principal's clinic_id, and new accounts are
always created in the caller's clinic.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List, Optional
import structlog
import uuid

from app.core.auth import hash_password
from app.core.database import get_session
from app.core.dependencies import protect
from app.core.permissions import Operation
from app.core.principal import Principal
from app.models.base import utc_now
from app.models.user import User, UserRole
from app.schemas.user import DoctorSummary, UserCreate, UserResponse, UserUpdate

logger = structlog.get_logger(__name__)
router = APIRouter()


async def _get_user_or_404(user_id: uuid.UUID, clinic_id: uuid.UUID, session: AsyncSession) -> User:
    result = await session.exec(
        select(User).where(User.id == user_id, User.clinic_id == clinic_id)
    )
    user = result.first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("/", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    principal: Principal = Depends(protect(Operation.USER_LIST)),
    session: AsyncSession = Depends(get_session)
):
    """List active staff of the caller's clinic"""
    query = select(User).where(
        User.clinic_id == uuid.UUID(principal.clinic_id),
        User.is_active == True,  # noqa: E712
    )
    if role is not None:
        query = query.where(User.role == role)

    result = await session.exec(query.order_by(User.last_name, User.first_name))
    return result.all()


@router.get("/doctors", response_model=List[DoctorSummary])
async def list_doctors(
    principal: Principal = Depends(protect(Operation.DOCTOR_LIST)),
    session: AsyncSession = Depends(get_session)
):
    """List active doctors of the caller's clinic"""
    result = await session.exec(
        select(User).where(
            User.clinic_id == uuid.UUID(principal.clinic_id),
            User.role == UserRole.DOCTOR,
            User.is_active == True,  # noqa: E712
        ).order_by(User.last_name, User.first_name)
    )
    return result.all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.USER_VIEW)),
    session: AsyncSession = Depends(get_session)
):
    """Get a staff member by ID"""
    return await _get_user_or_404(user_id, uuid.UUID(principal.clinic_id), session)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    principal: Principal = Depends(protect(Operation.USER_CREATE)),
    session: AsyncSession = Depends(get_session)
):
    """Create a staff account in the caller's clinic"""
    email = user_data.email.lower()
    result = await session.exec(select(User.id).where(User.email == email))
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = User(
        clinic_id=uuid.UUID(principal.clinic_id),
        email=email,
        password_hash=hash_password(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        role=user_data.role,
        # Accounts created by an admin skip email verification
        email_verified=True,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info(
        "user_created",
        user_id=str(user.id),
        role=user.role.value,
        clinic_id=principal.clinic_id,
        created_by=principal.user_id,
    )
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    user_data: UserUpdate,
    principal: Principal = Depends(protect(Operation.USER_UPDATE)),
    session: AsyncSession = Depends(get_session)
):
    """Update a staff member"""
    user = await _get_user_or_404(user_id, uuid.UUID(principal.clinic_id), session)

    for key, value in user_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, key, value)

    user.updated_at = utc_now()
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info("user_updated", user_id=str(user_id), clinic_id=principal.clinic_id, updated_by=principal.user_id)
    return user


@router.delete("/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.USER_DELETE)),
    session: AsyncSession = Depends(get_session)
):
    """Soft delete a staff member; their tokens stop working immediately"""
    user = await _get_user_or_404(user_id, uuid.UUID(principal.clinic_id), session)

    user.is_active = False
    user.updated_at = utc_now()
    session.add(user)
    await session.commit()

    logger.info("user_deactivated", user_id=str(user_id), clinic_id=principal.clinic_id, deactivated_by=principal.user_id)
    return {"success": True, "message": "User deactivated"}
