"""
Pydantic schemas for clinic administration
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import datetime
import uuid

from app.models.clinic import SubscriptionPlan, SubscriptionStatus


class ClinicCreate(BaseModel):
    """Clinic creation schema"""
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=3, max_length=100, pattern=r"^[a-z0-9-]+$")
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    subscription_plan: SubscriptionPlan = SubscriptionPlan.PROFESSIONAL


class SubscriptionUpdate(BaseModel):
    """Subscription change requested by a super admin"""
    status: SubscriptionStatus
    plan: Optional[SubscriptionPlan] = None


class ClinicResponse(BaseModel):
    """Clinic response model; never includes the API key"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    email: str
    phone: Optional[str]
    subscription_status: SubscriptionStatus
    subscription_plan: SubscriptionPlan
    trial_ends_at: Optional[datetime]
    subscription_ends_at: Optional[datetime]
    is_active: bool
    created_at: datetime


class ApiKeyResponse(BaseModel):
    api_key: str
    api_key_expires_at: datetime
