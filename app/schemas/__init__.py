"""
Schemas for API responses and requests
"""

from app.schemas.token import TokenPayload, TokenResponse
from app.schemas.user import DoctorSummary, UserCreate, UserLogin, UserResponse, UserUpdate
from app.schemas.clinic import ClinicCreate, ClinicResponse, SubscriptionUpdate, ApiKeyResponse
from app.schemas.patient import PatientCreate, PatientUpdate, PatientResponse
from app.schemas.integration import IntegrationConfigResponse

__all__ = [
    "TokenPayload",
    "TokenResponse",
    "UserLogin",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "DoctorSummary",
    "ClinicCreate",
    "ClinicResponse",
    "SubscriptionUpdate",
    "ApiKeyResponse",
    "PatientCreate",
    "PatientUpdate",
    "PatientResponse",
    "IntegrationConfigResponse",
]
