# GoGoTime - User and Auth Schemas

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import EntityResponse, VersionedUpdate


class UserCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=32)
    password: str = Field(..., min_length=8, max_length=128)
    role_id: Optional[uuid.UUID] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(VersionedUpdate):
    """
    Profile fields anyone may change on their own account, plus role_id
    and is_active, which only someone else with update_user may change.
    """
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=32)
    role_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class UserResponse(EntityResponse):
    role_id: Optional[uuid.UUID] = None
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    is_active: bool
    is_anonymized: bool
    last_login_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    device_id: Optional[str] = Field(None, max_length=100)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class MeResponse(BaseModel):
    user: UserResponse
    role: Optional[str] = None
    permissions: List[str] = []
