# afyalink/modules/appointments/appointments_controller.py
"""Appointments controller with API routes."""

from typing import List, Optional
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import ALL_STAFF, FRONT_DESK, require_roles
from afyalink.auth.schemas import TokenClaims
from afyalink.common.database.database import get_db_session
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import AppointmentStatus, UserRole

from . import appointments_service as service
from .schemas import (
    AppointmentResponse, AppointmentActionResponse, AppointmentDeleteResponse,
    AppointmentCreateRequest, AppointmentUpdateRequest,
)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.get("", response_model=List[AppointmentResponse])
async def get_appointments(
    patient_id: Optional[UUID] = Query(None),
    doctor_id: Optional[UUID] = Query(None),
    appointment_date: Optional[date] = Query(None, alias="date", description="Appointment date (YYYY-MM-DD)"),
    status: Optional[AppointmentStatus] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*ALL_STAFF))
):
    """List appointments, optionally filtered by patient, doctor, date and status."""
    return await service.list_appointments(db, patient_id, doctor_id, appointment_date, status)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*ALL_STAFF))
):
    """Get a single appointment by ID."""
    return await service.get_appointment_by_id(db, appointment_id)


@router.post("", response_model=AppointmentActionResponse, status_code=201)
async def create_appointment(
    request: AppointmentCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*FRONT_DESK))
):
    """Book a new appointment."""
    appointment = await service.create_appointment(db, claims, request)
    return AppointmentActionResponse(message=GlobalMessages.APPOINTMENT_CREATED, appointment=appointment)


@router.put("/{appointment_id}", response_model=AppointmentActionResponse)
async def update_appointment(
    appointment_id: UUID,
    request: AppointmentUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(*FRONT_DESK))
):
    """Update appointment details, status or slot."""
    appointment = await service.update_appointment(db, appointment_id, request)
    return AppointmentActionResponse(message=GlobalMessages.APPOINTMENT_UPDATED, appointment=appointment)


@router.delete("/{appointment_id}", response_model=AppointmentDeleteResponse)
async def delete_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN))
):
    """Delete an appointment."""
    deleted_id = await service.delete_appointment(db, appointment_id)
    return AppointmentDeleteResponse(message=GlobalMessages.APPOINTMENT_DELETED, id=deleted_id)
