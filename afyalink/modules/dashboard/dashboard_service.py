# afyalink/modules/dashboard/dashboard_service.py
"""Dashboard service for admin statistics."""

from datetime import date

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.models.models import (
    User, UserRole, Patient, Appointment, AppointmentStatus, ClinicalNote,
)
from .schemas import AdminStatsResponse


async def _count(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model)) or 0


async def get_admin_stats(session: AsyncSession) -> AdminStatsResponse:
    """Count patients, staff per role, appointments per status and today's bookings."""
    today = date.today()

    role_rows = await session.execute(select(User.role, func.count()).group_by(User.role))
    users_by_role = {role.value: 0 for role in UserRole}
    for role, count in role_rows.all():
        users_by_role[role.value] = count

    status_rows = await session.execute(
        select(Appointment.status, func.count()).group_by(Appointment.status)
    )
    appointments_by_status = {status.value: 0 for status in AppointmentStatus}
    for status, count in status_rows.all():
        appointments_by_status[status.value] = count

    scheduled_today = await session.scalar(
        select(func.count())
        .select_from(Appointment)
        .where(Appointment.appointment_date == today)
        .where(Appointment.status == AppointmentStatus.SCHEDULED)
    ) or 0

    return AdminStatsResponse(
        total_patients=await _count(session, Patient),
        total_users=sum(users_by_role.values()),
        users_by_role=users_by_role,
        total_appointments=sum(appointments_by_status.values()),
        appointments_by_status=appointments_by_status,
        scheduled_today=scheduled_today,
        total_clinical_notes=await _count(session, ClinicalNote),
        as_of=today,
    )
