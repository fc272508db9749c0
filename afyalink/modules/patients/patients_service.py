# afyalink/modules/patients/patients_service.py
"""Patients service for business logic."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.common.utils.exceptions import ConflictError, NotFoundError, ValidationError
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import Appointment, ClinicalNote, Patient
from .schemas import PatientCreateRequest, PatientUpdateRequest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "date_of_birth", "gender", "contact_phone")


async def _national_id_taken(
    session: AsyncSession,
    national_id: str,
    exclude_id: Optional[UUID] = None
) -> bool:
    query = select(Patient.id).where(Patient.national_id == national_id)
    if exclude_id is not None:
        query = query.where(Patient.id != exclude_id)
    result = await session.execute(query)
    return result.first() is not None


async def get_patient_or_404(session: AsyncSession, patient_id: UUID) -> Patient:
    patient = await session.get(Patient, patient_id)
    if not patient:
        raise NotFoundError(GlobalMessages.PATIENT_NOT_FOUND)
    return patient


async def create_patient(session: AsyncSession, request: PatientCreateRequest) -> Patient:
    """Register a new patient; the national ID, when given, must be unique."""
    data = request.model_dump()
    if any(not data.get(field) for field in REQUIRED_FIELDS):
        raise ValidationError(GlobalMessages.PATIENT_FIELDS_REQUIRED)

    if request.national_id and await _national_id_taken(session, request.national_id):
        raise ConflictError(GlobalMessages.NATIONAL_ID_TAKEN)

    patient = Patient(**data)
    session.add(patient)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(GlobalMessages.NATIONAL_ID_TAKEN)
    await session.refresh(patient)
    return patient


async def list_patients(session: AsyncSession) -> List[Patient]:
    result = await session.execute(select(Patient).order_by(desc(Patient.created_at)))
    return list(result.scalars().all())


async def update_patient(
    session: AsyncSession,
    patient_id: UUID,
    request: PatientUpdateRequest
) -> Patient:
    """Apply only the supplied fields to an existing patient."""
    patient = await get_patient_or_404(session, patient_id)
    changes = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}

    national_id = changes.get("national_id")
    if national_id and await _national_id_taken(session, national_id, exclude_id=patient_id):
        raise ConflictError("Another patient with this national ID already exists.")

    for key, value in changes.items():
        setattr(patient, key, value)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("This national ID is already associated with another patient.")
    await session.refresh(patient)
    return patient


async def _is_referenced(session: AsyncSession, patient_id: UUID) -> bool:
    appointments = await session.scalar(
        select(func.count()).select_from(Appointment).where(Appointment.patient_id == patient_id)
    )
    notes = await session.scalar(
        select(func.count()).select_from(ClinicalNote).where(ClinicalNote.patient_id == patient_id)
    )
    return bool(appointments or notes)


async def delete_patient(session: AsyncSession, patient_id: UUID) -> UUID:
    """Delete a patient that no appointment or clinical note refers to."""
    patient = await get_patient_or_404(session, patient_id)

    if await _is_referenced(session, patient_id):
        raise ConflictError(GlobalMessages.PATIENT_IN_USE)

    await session.delete(patient)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(GlobalMessages.PATIENT_IN_USE)

    logger.info("Deleted patient %s", patient_id)
    return patient_id
