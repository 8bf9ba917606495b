"""
Clinic model - the tenant unit for data isolation
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from app.models.base import as_utc, timestamp_field, utc_now


class SubscriptionStatus(str, Enum):
    """Billing state of a clinic"""
    ACTIVE = "ACTIVE"
    TRIAL = "TRIAL"
    CANCELLED = "CANCELLED"
    SUSPENDED = "SUSPENDED"


# Statuses that block every non-super-admin request
INACTIVE_SUBSCRIPTION_STATUSES = frozenset({
    SubscriptionStatus.CANCELLED,
    SubscriptionStatus.SUSPENDED,
})


class SubscriptionPlan(str, Enum):
    """Subscription plans"""
    BASIC = "BASIC"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


# Plans whose clinics may call the integration API with an API key
INTEGRATION_PLANS = frozenset({
    SubscriptionPlan.PROFESSIONAL,
    SubscriptionPlan.ENTERPRISE,
})


class Clinic(SQLModel, table=True):
    """Clinic model for multi-tenant architecture"""

    __tablename__ = "clinics"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, max_length=200)
    slug: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(index=True, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    # Subscription
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.TRIAL, index=True)
    subscription_plan: SubscriptionPlan = Field(default=SubscriptionPlan.PROFESSIONAL)
    trial_ends_at: Optional[datetime] = timestamp_field(default=None)
    subscription_ends_at: Optional[datetime] = timestamp_field(default=None)

    # Integration key for external bots
    api_key: Optional[str] = Field(default=None, unique=True, index=True)
    api_key_expires_at: Optional[datetime] = timestamp_field(default=None)

    # Status
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: Optional[datetime] = timestamp_field(default=None)

    def has_inactive_subscription(self) -> bool:
        return self.subscription_status in INACTIVE_SUBSCRIPTION_STATUSES

    def trial_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether a TRIAL clinic is past its trial end date"""
        if self.subscription_status != SubscriptionStatus.TRIAL or self.trial_ends_at is None:
            return False
        return as_utc(self.trial_ends_at) < as_utc(now or utc_now())
