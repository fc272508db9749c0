# afyalink/auth/auth_service.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from afyalink.auth.schemas import RegisterRequest, TokenClaims
from afyalink.common.config import settings
from afyalink.common.utils.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError,
)
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.models.models import User, UserRole

logger = logging.getLogger(__name__)

# Initialize the password context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify that the provided password matches the hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT carrying the user's identity and role, including an expiration date."""
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode = {
        "id": str(user.id),
        "username": user.username,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a session token and return its claims.

    Raises AuthorizationError when the signature is invalid, the token has
    expired or the payload does not describe a known role.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return TokenClaims(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthorizationError(GlobalMessages.TOKEN_INVALID)
    except jwt.InvalidTokenError:
        raise AuthorizationError(GlobalMessages.TOKEN_INVALID)
    except (PydanticValidationError, TypeError):
        raise AuthorizationError(GlobalMessages.TOKEN_INVALID)


async def get_user_by_username(username: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def register_user(request: RegisterRequest, db: AsyncSession) -> Tuple[User, str]:
    """
    Create a new user account and issue a session token for it.

    The role defaults to receptionist; only the bcrypt hash of the password is stored.
    """
    if not request.username or not request.password:
        raise ValidationError(GlobalMessages.CREDENTIALS_REQUIRED)

    if await get_user_by_username(request.username, db):
        raise ConflictError(GlobalMessages.USERNAME_TAKEN)

    profile = request.model_dump(exclude={"username", "password", "role"}, exclude_none=True)
    new_user = User(
        username=request.username,
        password_hash=hash_password(request.password),
        role=request.role or UserRole.RECEPTIONIST,
        **profile,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same username
        await db.rollback()
        raise ConflictError(GlobalMessages.USERNAME_TAKEN)
    await db.refresh(new_user)

    logger.info("Registered user %s with role %s", new_user.username, new_user.role.value)
    return new_user, create_access_token(new_user)


async def authenticate_user(username: str, password: str, db: AsyncSession) -> User:
    """Attempt to retrieve the user by username and verify the password."""
    user = await get_user_by_username(username, db)

    # Unknown user and wrong password share one response
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for username %s", username)
        raise AuthenticationError(GlobalMessages.INVALID_CREDENTIALS)
    return user


async def login_user(username: Optional[str], password: Optional[str], db: AsyncSession) -> Tuple[User, str]:
    """Authenticate a user and return user with JWT access token."""
    if not username or not password:
        raise ValidationError(GlobalMessages.CREDENTIALS_REQUIRED)

    user = await authenticate_user(username, password, db)
    logger.info("User %s logged in", user.username)
    return user, create_access_token(user)


async def get_profile(claims: TokenClaims, db: AsyncSession) -> User:
    """Load the account behind a verified token."""
    user = await db.get(User, claims.id)
    if user is None:
        raise NotFoundError(GlobalMessages.USER_NOT_FOUND)
    return user
