# afyalink/modules/user/user_controller.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import ALL_STAFF, require_roles
from afyalink.auth.schemas import TokenClaims, UserResponse
from afyalink.common.database.database import get_db_session
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import UserRole
from afyalink.modules.user import user_service, schemas

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def get_users(
    role: Optional[UserRole] = Query(None, description="Only return users with this role"),
    claims: TokenClaims = Depends(require_roles(*ALL_STAFF)),
    db: AsyncSession = Depends(get_db_session)
):
    """
    List staff accounts, e.g. `/api/users?role=doctor` for the doctor picker.
    """
    return await user_service.list_users(db, role)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session)
):
    return await user_service.get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=schemas.UserActionResponse)
async def update_user(
    user_id: UUID,
    user_data: schemas.UpdateUserRequest,
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Update any user's account, including their role.

    Only the provided fields will be updated.
    """
    user = await user_service.update_user(db, user_id, user_data.model_dump(exclude_unset=True))
    return schemas.UserActionResponse(
        message=GlobalMessages.USER_UPDATED,
        user=UserResponse.model_validate(user),
    )


@router.delete("/{user_id}", response_model=schemas.UserDeleteResponse)
async def delete_user(
    user_id: UUID,
    claims: TokenClaims = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session)
):
    deleted_id = await user_service.delete_user(db, claims, user_id)
    return schemas.UserDeleteResponse(message=GlobalMessages.USER_DELETED, id=deleted_id)
