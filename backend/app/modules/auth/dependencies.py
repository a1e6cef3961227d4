from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from dataclasses import dataclass
from typing import Optional, Callable, FrozenSet

from app.core.database import get_db
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    AccountNotFoundError,
    InvalidTokenError,
)
from app.core.logging_config import set_account_context
from app.core.security import decode_access_token
from app.models.account import Account
from app.models.role import RoleName
from app.services.auth_service import auth_service

# auto_error=False: a missing header must produce our own 401 body
security = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """Identity attached to a request once its access token checks out"""
    account: Account
    account_id: int
    role: RoleName


async def _resolve(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession
) -> AuthContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.")

    payload = decode_access_token(credentials.credentials)
    account_id = int(payload["sub"])
    try:
        role = RoleName(payload.get("role"))
    except ValueError:
        raise InvalidTokenError()

    account = await auth_service.get_active_account(db, account_id)
    if account is None:
        raise AccountNotFoundError()

    return AuthContext(account=account, account_id=account_id, role=role)


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> AuthContext:
    """
    Require a valid access token.

    Raises:
        AuthenticationError: no bearer token
        TokenExpiredError: token expired, client should refresh
        InvalidTokenError: token malformed or not an access token
        AccountNotFoundError: account gone or deactivated
    """
    auth = await _resolve(credentials, db)
    request.state.auth = auth
    set_account_context(auth.account_id, auth.role.value)
    return auth


async def optional_authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[AuthContext]:
    """Same checks as `authenticate`, but a failure means anonymous instead of 401"""
    try:
        auth = await _resolve(credentials, db)
    except AuthenticationError:
        return None
    request.state.auth = auth
    set_account_context(auth.account_id, auth.role.value)
    return auth


async def get_current_account(auth: AuthContext = Depends(authenticate)) -> Account:
    return auth.account


def _get_auth(request: Request) -> AuthContext:
    auth = getattr(request.state, "auth", None)
    if auth is None:
        raise AuthenticationError("Access denied. User not authenticated.")
    return auth


# ==================== Role Gates ====================

def authorize(*roles: RoleName) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Runs after `authenticate` and never touches the database.

    Usage:
        router = APIRouter(dependencies=[Depends(authenticate)])

        @router.get("/grades", dependencies=[Depends(teacher_or_admin)])
        async def list_grades():
            ...
    """
    allowed: FrozenSet[RoleName] = frozenset(RoleName(r) for r in roles)

    async def gate(request: Request) -> AuthContext:
        auth = _get_auth(request)
        if auth.role not in allowed:
            raise AuthorizationError()
        return auth

    gate.allowed_roles = allowed
    return gate


admin_only = authorize(RoleName.ADMIN)
teacher_or_admin = authorize(RoleName.TEACHER, RoleName.ADMIN)
parent_or_admin = authorize(RoleName.PARENT, RoleName.ADMIN)
student_or_admin = authorize(RoleName.STUDENT, RoleName.ADMIN)


def owner_or_admin(param: str = "account_id") -> Callable:
    """Admit Admin, or the account whose id is the `param` path parameter"""

    async def gate(request: Request) -> AuthContext:
        auth = _get_auth(request)
        if auth.role == RoleName.ADMIN:
            return auth
        if str(request.path_params.get(param)) != str(auth.account_id):
            raise AuthorizationError()
        return auth

    gate.allowed_roles = frozenset({RoleName.ADMIN})
    return gate
