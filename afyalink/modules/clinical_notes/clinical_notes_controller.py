# afyalink/modules/clinical_notes/clinical_notes_controller.py
"""Clinical notes controller with API routes."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import CLINICAL_STAFF, NOTE_AUTHORS, require_roles
from afyalink.auth.schemas import TokenClaims
from afyalink.common.database.database import get_db_session
from afyalink.common.utils.global_messages import GlobalMessages

from . import clinical_notes_service as service
from .schemas import (
    ClinicalNoteActionResponse, ClinicalNoteCreateRequest, ClinicalNoteDeleteResponse,
    ClinicalNoteResponse, ClinicalNoteUpdateRequest,
)

router = APIRouter(prefix="/api/clinical-notes", tags=["Clinical Notes"])


@router.post("", response_model=ClinicalNoteActionResponse, status_code=201)
async def create_clinical_note(
    request: ClinicalNoteCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*NOTE_AUTHORS))
):
    """Create a clinical note authored by the current user."""
    note = await service.create_clinical_note(db, claims, request)
    return ClinicalNoteActionResponse(message=GlobalMessages.NOTE_CREATED, note=note)


@router.get("/patient/{patient_id}", response_model=List[ClinicalNoteResponse])
async def get_patient_notes(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*CLINICAL_STAFF))
):
    """Get all clinical notes for a patient, latest visit first."""
    return await service.list_notes_by_patient(db, patient_id)


@router.get("/{note_id}", response_model=ClinicalNoteResponse)
async def get_clinical_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*CLINICAL_STAFF))
):
    """Get a single clinical note by ID."""
    return await service.get_clinical_note_by_id(db, note_id)


@router.put("/{note_id}", response_model=ClinicalNoteActionResponse)
async def update_clinical_note(
    note_id: UUID,
    request: ClinicalNoteUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*NOTE_AUTHORS))
):
    """Update a clinical note. Only its author or an admin may do so."""
    note = await service.update_clinical_note(db, claims, note_id, request)
    return ClinicalNoteActionResponse(message=GlobalMessages.NOTE_UPDATED, note=note)


@router.delete("/{note_id}", response_model=ClinicalNoteDeleteResponse)
async def delete_clinical_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*NOTE_AUTHORS))
):
    """Delete a clinical note. Only its author or an admin may do so."""
    deleted_id = await service.delete_clinical_note(db, claims, note_id)
    return ClinicalNoteDeleteResponse(message=GlobalMessages.NOTE_DELETED, id=deleted_id)
