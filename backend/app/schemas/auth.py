from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, Dict, Any, Union
from datetime import datetime
import re

from app.models.role import RoleName
from app.schemas.profile import (
    StudentProfileResponse,
    TeacherProfileResponse,
    ParentProfileResponse,
)

PASSWORD_MIN_LENGTH = 6
_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def validate_password_strength(password: str) -> str:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not _PASSWORD_PATTERN.match(password):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, and one number"
        )
    return password


def normalize_email(email: str) -> str:
    """Emails compare case-insensitively; they are stored and looked up lower-cased"""
    return email.strip().lower()


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    role: RoleName
    # Shape depends on `role`; validated by the provisioning flow
    profile: Optional[Dict[str, Any]] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password != self.new_password:
            raise ValueError("Password confirmation does not match")
        return self


# ============================================
# Responses
# ============================================

ProfileResponse = Union[StudentProfileResponse, TeacherProfileResponse, ParentProfileResponse]


class AccountResponse(BaseModel):
    id: int
    email: str
    role: str = Field(validation_alias="role_name")
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthData(TokenPair):
    account: AccountResponse
    profile: Optional[ProfileResponse] = None


class AccountProfile(BaseModel):
    account: AccountResponse
    profile: Optional[ProfileResponse] = None


class VerifiedIdentity(BaseModel):
    id: int
    email: str
    role: str


class AuthStatus(BaseModel):
    authenticated: bool
    account_id: Optional[int] = None
    role: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class AuthResponse(MessageResponse):
    data: AuthData


class TokenRefreshResponse(MessageResponse):
    data: TokenPair


class AccountProfileResponse(MessageResponse):
    data: AccountProfile


class VerifyTokenResponse(MessageResponse):
    data: VerifiedIdentity


class AuthStatusResponse(MessageResponse):
    data: AuthStatus
