# Pydantic schemas
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    ChangePasswordRequest,
    AccountResponse,
    TokenPair,
    AuthData,
    AccountProfile,
    MessageResponse,
    AuthResponse,
    TokenRefreshResponse,
    AccountProfileResponse,
    VerifyTokenResponse,
    AuthStatusResponse,
)
from app.schemas.profile import (
    StudentProfileCreate,
    TeacherProfileCreate,
    ParentProfileCreate,
    StudentProfileResponse,
    TeacherProfileResponse,
    ParentProfileResponse,
)
