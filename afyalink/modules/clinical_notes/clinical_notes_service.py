# afyalink/modules/clinical_notes/clinical_notes_service.py
"""Clinical notes service: authorship rules for patient notes."""

import logging
from typing import List
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.schemas import TokenClaims
from afyalink.common.utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import ClinicalNote, Patient, User, UserRole
from .schemas import (
    ClinicalNoteCreateRequest, ClinicalNoteUpdateRequest, ClinicalNoteResponse,
)

logger = logging.getLogger(__name__)

NOTE_AUTHOR_ROLES = (UserRole.DOCTOR, UserRole.ADMIN)


def can_modify_note(claims: TokenClaims, note: ClinicalNote) -> bool:
    """Only the authoring user or an admin may change or remove a note."""
    return claims.role == UserRole.ADMIN or claims.id == note.doctor_id


def _note_listing_query():
    return (
        select(
            ClinicalNote,
            Patient.first_name.label("patient_first_name"),
            Patient.last_name.label("patient_last_name"),
            User.username.label("doctor_username"),
            User.first_name.label("doctor_first_name"),
            User.last_name.label("doctor_last_name"),
        )
        .join(Patient, ClinicalNote.patient_id == Patient.id)
        .join(User, ClinicalNote.doctor_id == User.id)
    )


def _build_note_response(row) -> ClinicalNoteResponse:
    note = row.ClinicalNote
    return ClinicalNoteResponse(
        id=note.id,
        patient_id=note.patient_id,
        doctor_id=note.doctor_id,
        visit_datetime=note.visit_datetime,
        chief_complaint=note.chief_complaint,
        diagnosis=note.diagnosis,
        medications_prescribed=note.medications_prescribed,
        vitals=note.vitals,
        notes=note.notes,
        patient_first_name=row.patient_first_name,
        patient_last_name=row.patient_last_name,
        doctor_username=row.doctor_username,
        doctor_first_name=row.doctor_first_name,
        doctor_last_name=row.doctor_last_name,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


async def _get_note_or_404(session: AsyncSession, note_id: UUID) -> ClinicalNote:
    note = await session.get(ClinicalNote, note_id)
    if not note:
        raise NotFoundError(GlobalMessages.NOTE_NOT_FOUND)
    return note


async def get_clinical_note_by_id(session: AsyncSession, note_id: UUID) -> ClinicalNoteResponse:
    result = await session.execute(_note_listing_query().where(ClinicalNote.id == note_id))
    row = result.first()
    if not row:
        raise NotFoundError(GlobalMessages.NOTE_NOT_FOUND)
    return _build_note_response(row)


async def list_notes_by_patient(session: AsyncSession, patient_id: UUID) -> List[ClinicalNoteResponse]:
    """All notes for a patient, most recent visit first."""
    result = await session.execute(
        _note_listing_query()
        .where(ClinicalNote.patient_id == patient_id)
        .order_by(desc(ClinicalNote.visit_datetime))
    )
    return [_build_note_response(row) for row in result.all()]


async def create_clinical_note(
    session: AsyncSession,
    claims: TokenClaims,
    request: ClinicalNoteCreateRequest
) -> ClinicalNoteResponse:
    """Record a visit note authored by the calling doctor or admin."""
    if not request.patient_id or not request.chief_complaint:
        raise ValidationError(GlobalMessages.NOTE_FIELDS_REQUIRED)

    if not await session.get(Patient, request.patient_id):
        raise NotFoundError(GlobalMessages.PATIENT_NOT_FOUND)

    if claims.role not in NOTE_AUTHOR_ROLES:
        raise AuthorizationError(GlobalMessages.NOTE_CREATE_FORBIDDEN)

    note = ClinicalNote(
        patient_id=request.patient_id,
        doctor_id=claims.id,
        visit_datetime=request.visit_datetime or datetime.now(timezone.utc),
        chief_complaint=request.chief_complaint,
        diagnosis=request.diagnosis,
        medications_prescribed=request.medications_prescribed,
        vitals=request.vitals,
        notes=request.notes,
    )
    session.add(note)
    await session.commit()

    logger.info("User %s created clinical note %s for patient %s", claims.username, note.id, note.patient_id)
    return await get_clinical_note_by_id(session, note.id)


async def update_clinical_note(
    session: AsyncSession,
    claims: TokenClaims,
    note_id: UUID,
    request: ClinicalNoteUpdateRequest
) -> ClinicalNoteResponse:
    """Merge-patch the content of a note; authorship never changes."""
    note = await _get_note_or_404(session, note_id)

    if not can_modify_note(claims, note):
        logger.warning("User %s denied update of clinical note %s", claims.username, note_id)
        raise AuthorizationError(GlobalMessages.NOTE_UPDATE_FORBIDDEN)

    changes = request.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None:
            continue
        setattr(note, key, value)
    await session.commit()

    return await get_clinical_note_by_id(session, note_id)


async def delete_clinical_note(session: AsyncSession, claims: TokenClaims, note_id: UUID) -> UUID:
    note = await _get_note_or_404(session, note_id)

    if not can_modify_note(claims, note):
        logger.warning("User %s denied deletion of clinical note %s", claims.username, note_id)
        raise AuthorizationError(GlobalMessages.NOTE_DELETE_FORBIDDEN)

    await session.delete(note)
    await session.commit()

    logger.info("User %s deleted clinical note %s", claims.username, note_id)
    return note_id
