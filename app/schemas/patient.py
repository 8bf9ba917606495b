"""
Pydantic schemas for patients
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import date, datetime
import uuid


class PatientCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    document_number: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None
    notes: Optional[str] = None
    # Treating doctor; must belong to the same clinic
    doctor_id: Optional[uuid.UUID] = None


class PatientUpdate(BaseModel):
    """Partial update; clinic_id is deliberately not updatable"""
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    document_number: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None
    notes: Optional[str] = None
    doctor_id: Optional[uuid.UUID] = None


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    clinic_id: uuid.UUID
    doctor_id: Optional[uuid.UUID] = None
    first_name: str
    last_name: str
    document_number: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    birth_date: Optional[date]
    notes: Optional[str]
    created_at: datetime
