"""
User authentication API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from datetime import timedelta
import structlog
import uuid

from app.core.auth import create_access_token, verify_password
from app.core.config import get_settings
from app.core.database import get_session
from app.core.dependencies import protect
from app.core.permissions import Operation
from app.core.principal import Principal
from app.models.base import utc_now
from app.models.clinic import Clinic
from app.models.user import User, UserRole
from app.schemas.token import TokenResponse
from app.schemas.user import UserLogin, UserResponse

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _check_clinic_allows_login(user: User, session: AsyncSession) -> None:
    """Reject logins into a clinic that is deactivated, unpaid or past its trial"""
    if user.role == UserRole.SUPER_ADMIN or user.clinic_id is None:
        return

    clinic = await session.get(Clinic, user.clinic_id)
    if clinic is None:
        raise _unauthorized("The clinic no longer exists")
    if not clinic.is_active:
        raise _unauthorized("The clinic is deactivated")
    if clinic.has_inactive_subscription():
        raise _unauthorized("The clinic subscription is not active")
    if clinic.trial_expired():
        raise _unauthorized("The trial period has expired. Please upgrade your subscription")


@router.post("/login", response_model=TokenResponse)
async def login_user(
    login_data: UserLogin,
    session: AsyncSession = Depends(get_session)
):
    """Login user"""
    result = await session.exec(select(User).where(User.email == login_data.email.lower()))
    user = result.first()

    if not user:
        raise _unauthorized("Invalid email or password")

    if not user.is_active:
        raise _unauthorized("User account is inactive")

    if not user.email_verified:
        raise _unauthorized("Please verify your email before logging in")

    now = utc_now()
    if user.is_locked(now):
        raise _unauthorized("Account temporarily locked. Try again later")

    await _check_clinic_allows_login(user, session)

    if not verify_password(login_data.password, user.password_hash):
        user.failed_login_attempts += 1
        if user.failed_login_attempts >= settings.MAX_FAILED_LOGIN_ATTEMPTS:
            user.locked_until = now + timedelta(minutes=settings.ACCOUNT_LOCK_MINUTES)
            logger.warning("account_locked", user_id=str(user.id), attempts=user.failed_login_attempts)
        session.add(user)
        await session.commit()
        raise _unauthorized("Invalid email or password")

    # Reset failed attempts on successful login
    user.failed_login_attempts = 0
    user.locked_until = None
    user.last_login_at = now
    session.add(user)
    await session.commit()

    logger.info("user_logged_in", user_id=str(user.id), clinic_id=str(user.clinic_id) if user.clinic_id else None)

    access_token = create_access_token(
        user_id=user.id,
        role=user.role,
        clinic_id=user.clinic_id,
        email=user.email,
    )

    return TokenResponse(
        access_token=access_token,
        user_id=str(user.id),
        role=user.role,
        clinic_id=str(user.clinic_id) if user.clinic_id else None,
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    principal: Principal = Depends(protect(Operation.CURRENT_USER_VIEW)),
    session: AsyncSession = Depends(get_session)
):
    """Get current user info"""
    try:
        user = await session.get(User, uuid.UUID(principal.user_id))
    except ValueError:
        user = None

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return user
