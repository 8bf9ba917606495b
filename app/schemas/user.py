"""
Pydantic schemas for users
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.models.user import UserRole

# Roles a clinic admin may hand out; super admins are provisioned out of band
CLINIC_ASSIGNABLE_ROLES = frozenset({
    UserRole.CLINIC_ADMIN,
    UserRole.DOCTOR,
    UserRole.SECRETARY,
})


def _clinic_role(role: Optional[UserRole]) -> Optional[UserRole]:
    if role is not None and role not in CLINIC_ASSIGNABLE_ROLES:
        raise ValueError("Role cannot be assigned within a clinic")
    return role


class UserLogin(BaseModel):
    """User login schema"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)


class UserCreate(BaseModel):
    """Staff account created by a clinic admin inside their own clinic"""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    role: UserRole

    @field_validator("role")
    @classmethod
    def role_within_clinic(cls, role: Optional[UserRole]) -> Optional[UserRole]:
        return _clinic_role(role)


class UserUpdate(BaseModel):
    """Partial update; email and clinic are not updatable"""
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator("role")
    @classmethod
    def role_within_clinic(cls, role: Optional[UserRole]) -> Optional[UserRole]:
        return _clinic_role(role)


class UserResponse(BaseModel):
    """User response model"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: UserRole
    clinic_id: Optional[uuid.UUID]
    is_active: bool
    email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime]


class DoctorSummary(BaseModel):
    """Doctor entry for scheduling pickers and integrations"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
