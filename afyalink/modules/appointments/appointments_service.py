# afyalink/modules/appointments/appointments_service.py
"""
Appointments service: booking rules for doctor schedules.

A doctor can hold at most one Scheduled appointment per (date, time) slot.
The lookup in `find_conflicting_appointment` only produces a friendly error
early; the partial unique index on the appointments table is what actually
guarantees a single winner when two bookings race for the same slot.

Status changes are not validated: any status may follow any other.
"""

import logging
from typing import Optional, List
from datetime import date, time
from uuid import UUID

from sqlalchemy import select, desc, asc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.schemas import TokenClaims
from afyalink.common.utils.exceptions import ConflictError, NotFoundError, ValidationError
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import (
    User, UserRole, Patient, Appointment, AppointmentStatus,
)
from .schemas import (
    AppointmentCreateRequest, AppointmentUpdateRequest, AppointmentResponse,
)

logger = logging.getLogger(__name__)

SLOT_FIELDS = ("doctor_id", "appointment_date", "appointment_time", "status")


# ============================================================================
# QUERY HELPERS
# ============================================================================

def _appointment_listing_query():
    """Appointments joined with the names shown in listings."""
    return (
        select(
            Appointment,
            Patient.first_name.label("patient_first_name"),
            Patient.last_name.label("patient_last_name"),
            User.username.label("doctor_username"),
            User.first_name.label("doctor_first_name"),
            User.last_name.label("doctor_last_name"),
        )
        .join(Patient, Appointment.patient_id == Patient.id)
        .join(User, Appointment.doctor_id == User.id)
    )


def _build_appointment_response(row) -> AppointmentResponse:
    appointment = row.Appointment
    return AppointmentResponse(
        id=appointment.id,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        appointment_date=appointment.appointment_date,
        appointment_time=appointment.appointment_time.strftime("%H:%M"),
        status=appointment.status,
        reason=appointment.reason,
        patient_first_name=row.patient_first_name,
        patient_last_name=row.patient_last_name,
        doctor_username=row.doctor_username,
        doctor_first_name=row.doctor_first_name,
        doctor_last_name=row.doctor_last_name,
        created_at=appointment.created_at,
        updated_at=appointment.updated_at,
    )


async def _patient_exists(session: AsyncSession, patient_id: UUID) -> bool:
    result = await session.execute(select(Patient.id).where(Patient.id == patient_id))
    return result.first() is not None


async def is_doctor(session: AsyncSession, user_id: UUID) -> bool:
    """True only for an existing user whose role is exactly doctor."""
    result = await session.execute(select(User.role).where(User.id == user_id))
    role = result.scalar_one_or_none()
    return role == UserRole.DOCTOR


async def find_conflicting_appointment(
    session: AsyncSession,
    doctor_id: UUID,
    appointment_date: date,
    appointment_time: time,
    exclude_id: Optional[UUID] = None
) -> Optional[Appointment]:
    """Return a Scheduled appointment already holding the doctor's slot, if any."""
    query = (
        select(Appointment)
        .where(Appointment.doctor_id == doctor_id)
        .where(Appointment.appointment_date == appointment_date)
        .where(Appointment.appointment_time == appointment_time)
        .where(Appointment.status == AppointmentStatus.SCHEDULED)
    )
    if exclude_id is not None:
        query = query.where(Appointment.id != exclude_id)
    result = await session.execute(query.limit(1))
    return result.scalars().first()


# ============================================================================
# OPERATIONS
# ============================================================================

async def get_appointment_by_id(
    session: AsyncSession,
    appointment_id: UUID
) -> AppointmentResponse:
    """Get a single appointment with patient and doctor names."""
    result = await session.execute(
        _appointment_listing_query().where(Appointment.id == appointment_id)
    )
    row = result.first()
    if not row:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)
    return _build_appointment_response(row)


async def list_appointments(
    session: AsyncSession,
    patient_id: Optional[UUID] = None,
    doctor_id: Optional[UUID] = None,
    appointment_date: Optional[date] = None,
    status: Optional[AppointmentStatus] = None
) -> List[AppointmentResponse]:
    """List appointments matching every filter given, newest date first."""
    query = _appointment_listing_query()

    if patient_id:
        query = query.where(Appointment.patient_id == patient_id)
    if doctor_id:
        query = query.where(Appointment.doctor_id == doctor_id)
    if appointment_date:
        query = query.where(Appointment.appointment_date == appointment_date)
    if status:
        query = query.where(Appointment.status == status)

    query = query.order_by(desc(Appointment.appointment_date), asc(Appointment.appointment_time))
    result = await session.execute(query)
    return [_build_appointment_response(row) for row in result.all()]


async def create_appointment(
    session: AsyncSession,
    claims: TokenClaims,
    request: AppointmentCreateRequest
) -> AppointmentResponse:
    """
    Book a new appointment.

    Checks run in order: required fields, patient exists, doctor is a doctor,
    slot is free. New appointments always start out Scheduled.
    """
    if not all([request.patient_id, request.doctor_id, request.appointment_date, request.appointment_time]):
        raise ValidationError(GlobalMessages.APPOINTMENT_FIELDS_REQUIRED)

    if not await _patient_exists(session, request.patient_id):
        raise ValidationError(GlobalMessages.PATIENT_NOT_FOUND)

    if not await is_doctor(session, request.doctor_id):
        raise ValidationError(GlobalMessages.INVALID_DOCTOR)

    conflict = await find_conflicting_appointment(
        session, request.doctor_id, request.appointment_date, request.appointment_time
    )
    if conflict:
        logger.info(
            "Rejected booking for doctor %s on %s at %s: slot taken by %s",
            request.doctor_id, request.appointment_date, request.appointment_time, conflict.id
        )
        raise ConflictError(GlobalMessages.DOCTOR_BOOKED)

    appointment = Appointment(
        patient_id=request.patient_id,
        doctor_id=request.doctor_id,
        appointment_date=request.appointment_date,
        appointment_time=request.appointment_time,
        status=AppointmentStatus.SCHEDULED,
        reason=request.reason,
    )
    session.add(appointment)
    try:
        await session.commit()
    except IntegrityError:
        # A concurrent booking took the slot between the check and the insert
        await session.rollback()
        logger.info("Slot for doctor %s taken by a concurrent booking", request.doctor_id)
        raise ConflictError(GlobalMessages.DOCTOR_BOOKED)

    logger.info("User %s booked appointment %s", claims.username, appointment.id)
    return await get_appointment_by_id(session, appointment.id)


async def update_appointment(
    session: AsyncSession,
    appointment_id: UUID,
    request: AppointmentUpdateRequest
) -> AppointmentResponse:
    """
    Merge-patch an appointment.

    When the doctor, date, time or status is touched and the result is still
    Scheduled, the slot is re-checked against every other appointment.
    """
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)

    changes = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}

    if "patient_id" in changes and not await _patient_exists(session, changes["patient_id"]):
        raise NotFoundError(GlobalMessages.PATIENT_NOT_FOUND)

    if "doctor_id" in changes and not await is_doctor(session, changes["doctor_id"]):
        raise ValidationError(GlobalMessages.INVALID_DOCTOR)

    new_doctor_id = changes.get("doctor_id", appointment.doctor_id)
    new_date = changes.get("appointment_date", appointment.appointment_date)
    new_time = changes.get("appointment_time", appointment.appointment_time)
    new_status = changes.get("status", appointment.status)

    if any(field in changes for field in SLOT_FIELDS) and new_status == AppointmentStatus.SCHEDULED:
        conflict = await find_conflicting_appointment(
            session, new_doctor_id, new_date, new_time, exclude_id=appointment_id
        )
        if conflict:
            logger.info(
                "Rejected update of appointment %s: slot taken by %s", appointment_id, conflict.id
            )
            raise ConflictError(GlobalMessages.DOCTOR_BOOKED_NEW_SLOT)

    for key, value in changes.items():
        setattr(appointment, key, value)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(GlobalMessages.DOCTOR_BOOKED_NEW_SLOT)

    logger.info("Updated appointment %s (%s)", appointment_id, ", ".join(sorted(changes)) or "no changes")
    return await get_appointment_by_id(session, appointment_id)


async def delete_appointment(session: AsyncSession, appointment_id: UUID) -> UUID:
    """Hard-delete an appointment and return its id."""
    appointment = await session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)

    await session.delete(appointment)
    await session.commit()

    logger.info("Deleted appointment %s", appointment_id)
    return appointment_id
