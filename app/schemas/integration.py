"""
Schemas for API-key authenticated integration endpoints
"""

from pydantic import BaseModel

from app.models.clinic import SubscriptionPlan


class IntegrationConfigResponse(BaseModel):
    clinic_id: str
    clinic_name: str
    subscription_plan: SubscriptionPlan
