# afyalink/modules/user/schemas.py

from typing import Optional
from datetime import date
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from afyalink.auth.schemas import UserResponse
from afyalink.models.models import UserRole


class UpdateUserRequest(BaseModel):
    """Admin edit of a staff account; omitted fields are left unchanged."""
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = None
    role: Optional[UserRole] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None


class UserActionResponse(BaseModel):
    message: str
    user: UserResponse


class UserDeleteResponse(BaseModel):
    message: str
    id: UUID
