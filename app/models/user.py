"""
User model with roles and clinic scoping
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from app.models.base import as_utc, timestamp_field, utc_now


class UserRole(str, Enum):
    """User roles for RBAC"""
    SUPER_ADMIN = "SUPER_ADMIN"
    CLINIC_ADMIN = "CLINIC_ADMIN"
    DOCTOR = "DOCTOR"
    SECRETARY = "SECRETARY"


class User(SQLModel, table=True):
    """User model with clinic isolation"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    clinic_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="clinics.id",
        index=True,
        description="Clinic ID for multi-tenant isolation; null only for super admins",
    )

    # Authentication
    email: str = Field(unique=True, index=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Profile
    first_name: str = Field(nullable=False, max_length=100)
    last_name: str = Field(nullable=False, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)

    # RBAC
    role: UserRole = Field(default=UserRole.SECRETARY, nullable=False, index=True)

    # Status
    is_active: bool = Field(default=True, index=True)
    email_verified: bool = Field(default=False)

    # Brute-force protection
    failed_login_attempts: int = Field(default=0)
    locked_until: Optional[datetime] = timestamp_field(default=None)

    # Timestamps
    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: Optional[datetime] = timestamp_field(default=None)
    last_login_at: Optional[datetime] = timestamp_field(default=None)

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        return self.locked_until is not None and as_utc(self.locked_until) > as_utc(now or utc_now())
