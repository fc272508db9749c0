# afyalink/auth/auth_controller.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from afyalink.auth.dependencies import get_current_claims
from afyalink.common.database.database import get_db_session
from afyalink.common.utils.global_messages import GlobalMessages
from afyalink.auth import auth_service, schemas

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: schemas.RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Register a new user account.

    - **username**: Unique login name
    - **password**: Password (stored as a bcrypt hash)
    - **role**: admin, doctor, nurse or receptionist (defaults to receptionist)
    - profile fields: first_name, last_name, email, phone_number, address, date_of_birth, gender
    """
    user, token = await auth_service.register_user(register_data, db)

    return schemas.AuthResponse(
        message=GlobalMessages.REGISTRATION_SUCCESSFUL,
        token=token,
        user=schemas.UserResponse.model_validate(user),
    )


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    credentials: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """
    Authenticate a user and return an access token valid for eight hours.
    """
    user, token = await auth_service.login_user(
        username=credentials.username,
        password=credentials.password,
        db=db
    )

    return schemas.AuthResponse(
        message=GlobalMessages.LOGIN_SUCCESS,
        token=token,
        user=schemas.UserResponse.model_validate(user),
    )


@router.get("/profile", response_model=schemas.ProfileResponse)
async def get_profile(
    claims: schemas.TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Get the current authenticated user's information.

    Requires authentication.
    """
    user = await auth_service.get_profile(claims, db)
    return schemas.ProfileResponse(user=schemas.UserResponse.model_validate(user))
