# afyalink/modules/user/user_service.py

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.auth_service import hash_password
from afyalink.auth.schemas import TokenClaims
from afyalink.common.utils.exceptions import ConflictError, NotFoundError, ValidationError
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import Appointment, ClinicalNote, User, UserRole

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession, role: Optional[UserRole] = None) -> List[User]:
    """List staff accounts, optionally narrowed to one role (e.g. the doctor picker)."""
    query = select(User)
    if role:
        query = query.where(User.role == role)
    result = await db.execute(query.order_by(User.username))
    return list(result.scalars().all())


async def get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError(GlobalMessages.USER_NOT_FOUND)
    return user


async def update_user(db: AsyncSession, user_id: UUID, profile_data: dict) -> User:
    """
    Update a user with the provided data.

    Only the fields provided (non-None) will be updated. A new password is
    re-hashed; a new username must not belong to anyone else.
    """
    user = await get_user_or_404(db, user_id)

    username = profile_data.get("username")
    if username and username != user.username:
        result = await db.execute(select(User.id).where(User.username == username))
        if result.first():
            raise ConflictError(GlobalMessages.USERNAME_TAKEN)

    password = profile_data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for key, value in profile_data.items():
        if value is not None and hasattr(user, key):
            setattr(user, key, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(GlobalMessages.USERNAME_TAKEN)
    await db.refresh(user)

    logger.info("Updated user %s", user.username)
    return user


async def delete_user(db: AsyncSession, claims: TokenClaims, user_id: UUID) -> UUID:
    """Delete a user that has no appointments or clinical notes on record."""
    if claims.id == user_id:
        raise ValidationError(GlobalMessages.CANNOT_DELETE_SELF)

    user = await get_user_or_404(db, user_id)

    appointments = await db.scalar(
        select(func.count()).select_from(Appointment).where(Appointment.doctor_id == user_id)
    )
    notes = await db.scalar(
        select(func.count()).select_from(ClinicalNote).where(ClinicalNote.doctor_id == user_id)
    )
    if appointments or notes:
        raise ConflictError(GlobalMessages.USER_IN_USE)

    await db.delete(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(GlobalMessages.USER_IN_USE)

    logger.info("User %s deleted user %s", claims.username, user_id)
    return user_id
