from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import SchoolAPIError, AuthenticationError
from app.core.logging_config import logger, set_account_context
from app.core.rate_limiter import login_rate_limit, register_rate_limit
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    ChangePasswordRequest,
    AuthResponse,
    TokenRefreshResponse,
    AccountProfileResponse,
    MessageResponse,
    VerifyTokenResponse,
    VerifiedIdentity,
    AuthStatusResponse,
    AuthStatus,
)
from app.modules.auth.dependencies import (
    AuthContext,
    authenticate,
    optional_authenticate,
)
from app.services.auth_service import auth_service


router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@register_rate_limit()
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an account with its role profile and sign it in"""
    client_ip = _client_ip(request)

    try:
        result = await auth_service.register(db, data)
    except SchoolAPIError as e:
        logger.log_auth_event(
            event="register",
            success=False,
            email=data.email,
            reason=e.message,
            client_ip=client_ip
        )
        raise

    set_account_context(result.account.id, result.account.role)
    logger.log_auth_event(
        event="register",
        success=True,
        email=result.account.email,
        client_ip=client_ip,
        user_role=result.account.role
    )

    return AuthResponse(message="User registered successfully", data=result)


@router.post("/login", response_model=AuthResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login (rate limited per client address)"""
    client_ip = _client_ip(request)

    try:
        result = await auth_service.login(db, credentials.email, credentials.password)
    except AuthenticationError:
        logger.log_auth_event(
            event="login",
            success=False,
            email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise

    set_account_context(result.account.id, result.account.role)
    logger.log_auth_event(
        event="login",
        success=True,
        email=result.account.email,
        client_ip=client_ip,
        user_role=result.account.role
    )

    return AuthResponse(message="Login successful", data=result)


@router.post("/refresh-token", response_model=TokenRefreshResponse)
async def refresh_token(
    request: Request,
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair"""
    try:
        tokens = await auth_service.refresh(db, data.refresh_token)
    except AuthenticationError as e:
        logger.log_auth_event(
            event="token_refresh",
            success=False,
            reason=e.message,
            client_ip=_client_ip(request)
        )
        raise

    return TokenRefreshResponse(message="Token refreshed successfully", data=tokens)


@router.get("/profile", response_model=AccountProfileResponse)
async def get_profile(
    auth: AuthContext = Depends(authenticate),
    db: AsyncSession = Depends(get_db)
):
    """Current account and its role profile"""
    data = await auth_service.get_account_profile(db, auth.account)
    return AccountProfileResponse(message="Profile retrieved successfully", data=data)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    auth: AuthContext = Depends(authenticate),
    db: AsyncSession = Depends(get_db)
):
    await auth_service.change_password(db, auth.account, data)

    logger.log_auth_event(
        event="change_password",
        success=True,
        email=auth.account.email,
        client_ip=_client_ip(request)
    )
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    auth: AuthContext = Depends(authenticate),
    db: AsyncSession = Depends(get_db)
):
    """
    Logout.

    Tokens are stateless, so this records the event and lets the client
    drop its tokens. The access token keeps working until it expires.
    """
    email = auth.account.email
    await auth_service.logout(db, auth.account)

    logger.log_auth_event(
        event="logout",
        success=True,
        email=email
    )
    return MessageResponse(message="Logout successful")


@router.get("/verify", response_model=VerifyTokenResponse)
async def verify_token(auth: AuthContext = Depends(authenticate)):
    """Check an access token and echo back who it belongs to"""
    return VerifyTokenResponse(
        message="Token is valid",
        data=VerifiedIdentity(
            id=auth.account_id,
            email=auth.account.email,
            role=auth.role.value,
        ),
    )


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(auth: Optional[AuthContext] = Depends(optional_authenticate)):
    """Works with or without a token; reports which"""
    if auth is None:
        return AuthStatusResponse(message="Not authenticated", data=AuthStatus(authenticated=False))

    return AuthStatusResponse(
        message="Authenticated",
        data=AuthStatus(authenticated=True, account_id=auth.account_id, role=auth.role.value),
    )
