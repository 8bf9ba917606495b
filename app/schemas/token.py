"""
Pydantic schemas for authentication and tokens
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class TokenPayload(BaseModel):
    """Claims of a verified JWT; signature and expiry are checked before this"""
    sub: str = Field(..., min_length=1, description="User ID")
    role: UserRole = Field(..., description="User role")
    clinic_id: Optional[str] = Field(default=None, description="Clinic ID, absent for super admins")
    email: Optional[str] = None
    exp: Optional[datetime] = Field(default=None, description="Expiration time")
    iat: Optional[datetime] = Field(default=None, description="Issued at")


class TokenResponse(BaseModel):
    """Token response"""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: UserRole
    clinic_id: Optional[str] = None
