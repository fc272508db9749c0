# afyalink/modules/patients/patients_controller.py
"""Patients controller with API routes."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import FRONT_DESK, get_current_claims, require_roles
from afyalink.auth.schemas import TokenClaims
from afyalink.common.database.database import get_db_session
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import UserRole

from . import patients_service as service
from .schemas import (
    DeleteResponse, PatientActionResponse, PatientCreateRequest,
    PatientResponse, PatientUpdateRequest,
)

router = APIRouter(prefix="/api/patients", tags=["Patients"])


@router.post("", response_model=PatientActionResponse, status_code=201)
async def create_patient(
    request: PatientCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*FRONT_DESK))
):
    """Register a new patient."""
    patient = await service.create_patient(db, request)
    return PatientActionResponse(
        message=GlobalMessages.PATIENT_CREATED,
        patient=PatientResponse.model_validate(patient),
    )


@router.get("", response_model=List[PatientResponse])
async def get_patients(
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(get_current_claims)
):
    """List all patients, newest first."""
    return await service.list_patients(db)


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(get_current_claims)
):
    """Get a single patient by ID."""
    return await service.get_patient_or_404(db, patient_id)


@router.put("/{patient_id}", response_model=PatientActionResponse)
async def update_patient(
    patient_id: UUID,
    request: PatientUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*FRONT_DESK))
):
    """Update patient details; only the provided fields change."""
    patient = await service.update_patient(db, patient_id, request)
    return PatientActionResponse(
        message=GlobalMessages.PATIENT_UPDATED,
        patient=PatientResponse.model_validate(patient),
    )


@router.delete("/{patient_id}", response_model=DeleteResponse)
async def delete_patient(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN))
):
    """Delete a patient with no appointments or clinical notes."""
    deleted_id = await service.delete_patient(db, patient_id)
    return DeleteResponse(message=GlobalMessages.PATIENT_DELETED, id=deleted_id)
