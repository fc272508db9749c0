# afyalink/modules/appointments/schemas.py
"""Appointments module Pydantic schemas."""

from typing import Optional
from datetime import date, time, datetime
from pydantic import BaseModel, Field, field_validator
from uuid import UUID

from afyalink.models.models import AppointmentStatus


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

def _whole_minute(value: Optional[time]) -> Optional[time]:
    """Slots are whole minutes."""
    if value is not None:
        return value.replace(second=0, microsecond=0)
    return value


class AppointmentCreateRequest(BaseModel):
    """Request to book a doctor for a patient at a date and time."""
    patient_id: Optional[UUID] = None
    doctor_id: Optional[UUID] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    reason: Optional[str] = Field(None, max_length=2000)

    @field_validator("appointment_time")
    def truncate_to_minute(cls, value):
        return _whole_minute(value)


class AppointmentUpdateRequest(BaseModel):
    """Merge-patch update; only the fields sent are applied."""
    patient_id: Optional[UUID] = None
    doctor_id: Optional[UUID] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    status: Optional[AppointmentStatus] = None
    reason: Optional[str] = Field(None, max_length=2000)

    @field_validator("appointment_time")
    def truncate_to_minute(cls, value):
        return _whole_minute(value)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class AppointmentResponse(BaseModel):
    """Appointment joined with patient and doctor display names."""
    id: UUID
    patient_id: UUID
    doctor_id: UUID
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus
    reason: Optional[str] = None
    patient_first_name: Optional[str] = None
    patient_last_name: Optional[str] = None
    doctor_username: Optional[str] = None
    doctor_first_name: Optional[str] = None
    doctor_last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AppointmentActionResponse(BaseModel):
    """Response for appointment create/update actions."""
    message: str
    appointment: AppointmentResponse


class AppointmentDeleteResponse(BaseModel):
    message: str
    id: UUID
