from datetime import datetime, timedelta
from functools import lru_cache
from typing import Optional, Dict, Any
from jose import JWTError, ExpiredSignatureError, jwt
import bcrypt

from app.core.config import settings
from app.core.exceptions import TokenExpiredError, InvalidTokenError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    if not hashed_password:
        return False
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt digest
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


@lru_cache(maxsize=1)
def get_dummy_password_hash() -> str:
    """Hash at the configured cost, checked against when no account matches a login"""
    return get_password_hash("not-a-real-password")


def _encode(data: Dict[str, Any], token_type: str, lifetime: timedelta, secret: str) -> str:
    now = datetime.utcnow()
    to_encode = data.copy()
    to_encode.update({
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    })
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token (signed with JWT_SECRET_KEY)"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta, settings.JWT_SECRET_KEY)


def create_refresh_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT refresh token (signed with JWT_REFRESH_SECRET_KEY)"""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(data, REFRESH_TOKEN_TYPE, expires_delta, settings.JWT_REFRESH_SECRET_KEY)


def build_token_claims(account_id: int, email: str, role: str) -> Dict[str, Any]:
    """Claims carried by both tokens. `sub` must be a string per RFC 7519."""
    return {
        "sub": str(account_id),
        "email": email,
        "role": role,
    }


def issue_token_pair(account_id: int, email: str, role: str) -> Dict[str, str]:
    """Create an access + refresh token pair for an account"""
    claims = build_token_claims(account_id, email, role)
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
    }


def _decode(
    token: str,
    secret: str,
    expected_type: str,
    expired: TokenExpiredError,
    invalid: InvalidTokenError
) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise expired
    except JWTError:
        raise invalid

    if payload.get("type") != expected_type:
        raise invalid

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise invalid

    return payload


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify an access token and return its claims.

    Raises:
        TokenExpiredError: signature is fine but `exp` has passed
        InvalidTokenError: anything else (bad signature, refresh token, garbage)
    """
    return _decode(
        token,
        settings.JWT_SECRET_KEY,
        ACCESS_TOKEN_TYPE,
        TokenExpiredError(),
        InvalidTokenError(),
    )


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """Verify a refresh token against the refresh secret and return its claims"""
    return _decode(
        token,
        settings.JWT_REFRESH_SECRET_KEY,
        REFRESH_TOKEN_TYPE,
        TokenExpiredError("Refresh token expired."),
        InvalidTokenError("Invalid refresh token."),
    )
