# afyalink/modules/clinical_notes/schemas.py
"""Clinical notes module Pydantic schemas."""

from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, field_validator


class ClinicalNoteCreateRequest(BaseModel):
    patient_id: Optional[UUID] = None
    visit_datetime: Optional[datetime] = None
    chief_complaint: Optional[str] = None
    diagnosis: Optional[str] = None
    medications_prescribed: Optional[str] = None
    vitals: Optional[str] = None
    notes: Optional[str] = None


class ClinicalNoteUpdateRequest(BaseModel):
    """Content fields only; the patient, the author and the visit time are fixed at creation."""
    chief_complaint: Optional[str] = None
    diagnosis: Optional[str] = None
    medications_prescribed: Optional[str] = None
    vitals: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("chief_complaint")
    def chief_complaint_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("chief complaint cannot be blank")
        return value


class ClinicalNoteResponse(BaseModel):
    id: UUID
    patient_id: UUID
    doctor_id: UUID
    visit_datetime: datetime
    chief_complaint: str
    diagnosis: Optional[str] = None
    medications_prescribed: Optional[str] = None
    vitals: Optional[str] = None
    notes: Optional[str] = None
    patient_first_name: Optional[str] = None
    patient_last_name: Optional[str] = None
    doctor_username: Optional[str] = None
    doctor_first_name: Optional[str] = None
    doctor_last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClinicalNoteActionResponse(BaseModel):
    message: str
    note: ClinicalNoteResponse


class ClinicalNoteDeleteResponse(BaseModel):
    message: str
    id: UUID
