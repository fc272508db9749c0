# afyalink/modules/dashboard/schemas.py
"""Dashboard module Pydantic schemas."""

from typing import Dict
from datetime import date
from pydantic import BaseModel


class AdminStatsResponse(BaseModel):
    """Headline counts for the admin dashboard."""
    total_patients: int
    total_users: int
    users_by_role: Dict[str, int]
    total_appointments: int
    appointments_by_status: Dict[str, int]
    scheduled_today: int
    total_clinical_notes: int
    as_of: date
