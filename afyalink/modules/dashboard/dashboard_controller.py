# afyalink/modules/dashboard/dashboard_controller.py
"""Dashboard controller with API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import require_roles
from afyalink.auth.schemas import TokenClaims
from afyalink.common.database.database import get_db_session
from afyalink.models.models import UserRole

from . import dashboard_service as service
from .schemas import AdminStatsResponse


router = APIRouter(prefix="/api/admin", tags=["Dashboard"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats(
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Get admin dashboard statistics:
    - Patient and staff totals (staff broken down by role)
    - Appointment totals by status
    - Scheduled appointments for today
    """
    return await service.get_admin_stats(db)
