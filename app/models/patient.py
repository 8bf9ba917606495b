"""
Patient model scoped to a clinic
"""

from sqlmodel import Field, SQLModel
from datetime import datetime, date
from typing import Optional
import uuid

from app.models.base import timestamp_field, utc_now


class Patient(SQLModel, table=True):
    """Patient record owned by exactly one clinic"""

    __tablename__ = "patients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    clinic_id: uuid.UUID = Field(foreign_key="clinics.id", index=True)
    doctor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100, index=True)
    document_number: Optional[str] = Field(default=None, max_length=50, index=True)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None
    notes: Optional[str] = None

    # Soft delete
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: Optional[datetime] = timestamp_field(default=None)
