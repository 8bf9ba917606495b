"""
Patients API endpoints

Every query is scoped by the principal's clinic_id. A patient belonging to
another clinic is reported as not found.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List, Optional
import structlog
import uuid

from app.core.database import get_session
from app.core.dependencies import protect
from app.core.permissions import Operation
from app.core.principal import Principal
from app.models.base import utc_now
from app.models.patient import Patient
from app.models.user import User, UserRole
from app.schemas.patient import PatientCreate, PatientResponse, PatientUpdate

logger = structlog.get_logger(__name__)
router = APIRouter()


def _clinic_scope(principal: Principal) -> uuid.UUID:
    """Clinic the request is scoped to; the tenant check guarantees one is set"""
    return uuid.UUID(principal.clinic_id)


async def _get_patient_or_404(patient_id: uuid.UUID, clinic_id: uuid.UUID, session: AsyncSession) -> Patient:
    result = await session.exec(
        select(Patient).where(
            Patient.id == patient_id,
            Patient.clinic_id == clinic_id,
            Patient.is_active == True,  # noqa: E712
        )
    )
    patient = result.first()
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found"
        )
    return patient


async def _check_doctor(doctor_id: uuid.UUID, clinic_id: uuid.UUID, session: AsyncSession) -> None:
    """Reject a treating doctor that is not an active doctor of the same clinic"""
    result = await session.exec(
        select(User.id).where(
            User.id == doctor_id,
            User.clinic_id == clinic_id,
            User.role == UserRole.DOCTOR,
            User.is_active == True,  # noqa: E712
        )
    )
    if result.first() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Doctor not found in this clinic"
        )


@router.get("/", response_model=List[PatientResponse])
async def list_patients(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    principal: Principal = Depends(protect(Operation.PATIENT_LIST)),
    session: AsyncSession = Depends(get_session)
):
    """List patients for the caller's clinic"""
    query = select(Patient).where(
        Patient.clinic_id == _clinic_scope(principal),
        Patient.is_active == True,  # noqa: E712
    )
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Patient.first_name.ilike(pattern),
            Patient.last_name.ilike(pattern),
            Patient.document_number.ilike(pattern),
        ))

    result = await session.exec(
        query.order_by(Patient.last_name, Patient.first_name).offset(skip).limit(limit)
    )
    return result.all()


@router.get("/my-patients", response_model=List[PatientResponse])
async def list_my_patients(
    principal: Principal = Depends(protect(Operation.PATIENT_LIST_OWN)),
    session: AsyncSession = Depends(get_session)
):
    """List patients the calling doctor is treating"""
    result = await session.exec(
        select(Patient).where(
            Patient.clinic_id == _clinic_scope(principal),
            Patient.doctor_id == uuid.UUID(principal.user_id),
            Patient.is_active == True,  # noqa: E712
        ).order_by(Patient.last_name, Patient.first_name)
    )
    return result.all()


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.PATIENT_VIEW)),
    session: AsyncSession = Depends(get_session)
):
    """Get patient by ID"""
    return await _get_patient_or_404(patient_id, _clinic_scope(principal), session)


@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientCreate,
    principal: Principal = Depends(protect(Operation.PATIENT_CREATE)),
    session: AsyncSession = Depends(get_session)
):
    """Create a patient in the caller's clinic"""
    clinic_id = _clinic_scope(principal)
    if patient_data.doctor_id is not None:
        await _check_doctor(patient_data.doctor_id, clinic_id, session)

    patient = Patient(clinic_id=clinic_id, **patient_data.model_dump())

    session.add(patient)
    await session.commit()
    await session.refresh(patient)

    logger.info("patient_created", patient_id=str(patient.id), clinic_id=principal.clinic_id)
    return patient


@router.patch("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: uuid.UUID,
    patient_data: PatientUpdate,
    principal: Principal = Depends(protect(Operation.PATIENT_UPDATE)),
    session: AsyncSession = Depends(get_session)
):
    """Update patient"""
    clinic_id = _clinic_scope(principal)
    patient = await _get_patient_or_404(patient_id, clinic_id, session)

    changes = patient_data.model_dump(exclude_unset=True)
    if changes.get("doctor_id") is not None:
        await _check_doctor(changes["doctor_id"], clinic_id, session)

    for key, value in changes.items():
        setattr(patient, key, value)

    patient.updated_at = utc_now()
    session.add(patient)
    await session.commit()
    await session.refresh(patient)

    logger.info("patient_updated", patient_id=str(patient_id), clinic_id=principal.clinic_id)
    return patient


@router.delete("/{patient_id}")
async def delete_patient(
    patient_id: uuid.UUID,
    principal: Principal = Depends(protect(Operation.PATIENT_DELETE)),
    session: AsyncSession = Depends(get_session)
):
    """Soft delete patient"""
    patient = await _get_patient_or_404(patient_id, _clinic_scope(principal), session)

    patient.is_active = False
    patient.updated_at = utc_now()
    session.add(patient)
    await session.commit()

    logger.info("patient_deleted", patient_id=str(patient_id), clinic_id=principal.clinic_id)
    return {"success": True, "message": "Patient deleted"}
