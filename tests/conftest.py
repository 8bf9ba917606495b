"""
Test configuration for pytest
"""

import os

# Test environment variables, set before any app module reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["DEBUG"] = "false"

from datetime import datetime, timedelta
from typing import Dict, Optional
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.auth import create_access_token, hash_password
from app.core.clinic_state import ClinicState
from app.core.database import get_session
from app.core.exceptions import ClinicNotFoundError
from app.core.principal import Principal
from app.models.clinic import Clinic, SubscriptionStatus
from app.models.user import User, UserRole


class InMemoryClinicStore:
    """Clinic store backed by a dict; records every lookup"""

    def __init__(self, clinics: Optional[Dict[str, ClinicState]] = None):
        self.clinics = dict(clinics or {})
        self.lookups = []

    def add(self, clinic_id: str, is_active: bool = True,
            subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE) -> ClinicState:
        state = ClinicState(clinic_id=clinic_id, is_active=is_active, subscription_status=subscription_status)
        self.clinics[clinic_id] = state
        return state

    async def get_clinic_state(self, clinic_id: str) -> ClinicState:
        self.lookups.append(clinic_id)
        state = self.clinics.get(clinic_id)
        if state is None:
            raise ClinicNotFoundError()
        return state


@pytest.fixture
def clinic_store() -> InMemoryClinicStore:
    """Empty in-memory clinic store"""
    return InMemoryClinicStore()


@pytest.fixture
def make_principal():
    """Factory for principals"""
    def _make(role: UserRole, clinic_id: Optional[str] = None, user_id: Optional[str] = None) -> Principal:
        return Principal(user_id=user_id or str(uuid.uuid4()), role=role, clinic_id=clinic_id)
    return _make


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database for each test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    """Create a database session for test setup and assertions"""
    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(engine):
    """HTTP client against the app, wired to the test database"""
    from app.main import app

    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_clinic(db: AsyncSession):
    """Factory persisting a clinic"""
    async def _create(
        slug: Optional[str] = None,
        is_active: bool = True,
        subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        trial_ends_at: Optional[datetime] = None,
        **fields,
    ) -> Clinic:
        slug = slug or f"clinic-{uuid.uuid4().hex[:8]}"
        clinic = Clinic(
            name=slug.replace("-", " ").title(),
            slug=slug,
            email=f"{slug}@example.com",
            is_active=is_active,
            subscription_status=subscription_status,
            trial_ends_at=trial_ends_at,
            **fields,
        )
        db.add(clinic)
        await db.commit()
        await db.refresh(clinic)
        return clinic
    return _create


@pytest.fixture
def create_user(db: AsyncSession):
    """Factory persisting a user"""
    async def _create(
        role: UserRole,
        clinic: Optional[Clinic] = None,
        password: Optional[str] = None,
        email: Optional[str] = None,
        **fields,
    ) -> User:
        user = User(
            clinic_id=clinic.id if clinic else None,
            email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password) if password else "not-a-real-hash",
            first_name="Test",
            last_name=role.value.title(),
            role=role,
            is_active=fields.pop("is_active", True),
            email_verified=fields.pop("email_verified", True),
            **fields,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _create


def auth_headers(user: User, expires_delta: Optional[timedelta] = None) -> Dict[str, str]:
    """Bearer header for a persisted user"""
    token = create_access_token(
        user_id=user.id,
        role=user.role,
        clinic_id=user.clinic_id,
        email=user.email,
        expires_delta=expires_delta,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
