"""
Rate Limiting for the School Management API
===========================================
Implements rate limiting using slowapi.

Counters live wherever RATE_LIMIT_STORAGE_URI points: memory:// keeps
them per process (approximate, reset on restart), redis://... shares
them between instances. Call sites never change.

Limits:
- Everything: RATE_LIMIT_DEFAULT per client address (100 per 15 minutes)
- /auth/login: RATE_LIMIT_LOGIN (brute force protection)
- /auth/register: RATE_LIMIT_REGISTER
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Optional, List

from app.core.config import settings
from app.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: the client address"""
    return f"ip:{get_remote_address(request)}"


def build_limiter(
    storage_uri: Optional[str] = None,
    default_limits: Optional[List[str]] = None,
    enabled: Optional[bool] = None
) -> Limiter:
    """
    Create a limiter. Arguments default to the settings values.

    Usage:
        limiter = build_limiter(storage_uri="redis://cache:6379")
    """
    return Limiter(
        key_func=get_client_identifier,
        default_limits=default_limits if default_limits is not None else [settings.RATE_LIMIT_DEFAULT],
        storage_uri=storage_uri or settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED if enabled is None else enabled,
        headers_enabled=False,
    )


# Create limiter instance
limiter = build_limiter()


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Render 429 in the API's error format"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)} on {request.url.path}: {exc.detail}",
        extra={"event_type": "rate_limit", "http_path": request.url.path}
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests from this IP, please try again later.",
            "code": "RATE_LIMITED",
        },
    )


def login_rate_limit():
    """Rate limit for login attempts"""
    return limiter.limit(settings.RATE_LIMIT_LOGIN, key_func=get_client_identifier)


def register_rate_limit():
    """Rate limit for account creation"""
    return limiter.limit(settings.RATE_LIMIT_REGISTER, key_func=get_client_identifier)
