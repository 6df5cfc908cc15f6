"""Pydantic schemas for credentials, sessions and profiles."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from hydromon.models import Role


def check_password_policy(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    has_upper = any(c.isupper() for c in value)
    has_lower = any(c.islower() for c in value)
    has_digit = any(c.isdigit() for c in value)
    if not (has_upper and has_lower and has_digit):
        raise ValueError("Password must include upper/lowercase letters and a number")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password_policy(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str
    confirm_new_password: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def confirmation_matches(cls, data):
        # checked before the policy so a typo is reported as such
        if isinstance(data, dict) and data.get("new_password") != data.get("confirm_new_password"):
            raise ValueError("Passwords do not match")
        return data

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return check_password_policy(v)


class DeleteAccountRequest(BaseModel):
    password: str = Field(min_length=1)


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)
    email: Optional[EmailStr] = None


class FederatedSignIn(BaseModel):
    provider: str = Field(min_length=1)
    provider_account_id: str = Field(min_length=1)
    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: Role
    email_verified: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SessionUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    user: SessionUser


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class UserPage(BaseModel):
    users: List[UserResponse]
    pagination: Pagination


class MessageResponse(BaseModel):
    message: str
