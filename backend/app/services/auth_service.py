"""
Auth Service - account provisioning and the token lifecycle

Handles:
- Registration (account + role profile in one unit of work)
- Login, token refresh and logout
- Profile lookup and password changes
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from datetime import datetime
from typing import Optional

from app.core.database import unit_of_work
from app.core.exceptions import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
)
from app.core.logging_config import logger
from app.core.security import (
    verify_password,
    get_password_hash,
    get_dummy_password_hash,
    issue_token_pair,
    decode_refresh_token,
)
from app.models.account import Account
from app.models.profile import Parent, StudentParent, ParentRelationship
from app.models.role import Role, RoleName
from app.schemas.auth import (
    RegisterRequest,
    ChangePasswordRequest,
    AccountResponse,
    AuthData,
    AccountProfile,
    TokenPair,
    normalize_email,
)
from app.services.profiles import (
    parse_profile,
    find_profile_conflict,
    build_profile,
    get_profile,
    profile_to_response,
)


class AuthService:
    """Service for authentication flows"""

    # ==================== LOOKUPS ====================

    async def get_role(self, db: AsyncSession, role_name: RoleName) -> Optional[Role]:
        result = await db.execute(select(Role).where(Role.name == role_name.value))
        return result.scalar_one_or_none()

    async def get_account_by_email(self, db: AsyncSession, email: str) -> Optional[Account]:
        """Find an account by email, active or not"""
        result = await db.execute(
            select(Account).where(Account.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_active_account(self, db: AsyncSession, account_id: int) -> Optional[Account]:
        """Find an account by id, only if it is still active"""
        result = await db.execute(
            select(Account).where(Account.id == account_id, Account.is_active == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def get_active_account_by_email(self, db: AsyncSession, email: str) -> Optional[Account]:
        result = await db.execute(
            select(Account).where(
                Account.email == normalize_email(email),
                Account.is_active == True  # noqa: E712
            )
        )
        return result.scalar_one_or_none()

    async def _parent_exists(self, db: AsyncSession, parent_id: int) -> bool:
        result = await db.execute(select(Parent.id).where(Parent.id == parent_id))
        return result.scalar_one_or_none() is not None

    # ==================== REGISTRATION ====================

    async def register(self, db: AsyncSession, data: RegisterRequest) -> AuthData:
        """
        Create an account and its role profile, then issue a token pair.

        Every check runs before the first write. The inserts share one
        unit of work, so a failure anywhere leaves no rows behind.

        Args:
            db: Database session
            data: Validated registration request

        Returns:
            Tokens, the new account and its profile (None for Admin)

        Raises:
            ConflictError: email or a unique profile field is taken
            BadRequestError: unknown role, invalid profile, unknown parent
            InternalError: database failure while writing
        """
        email = normalize_email(data.email)

        if await self.get_account_by_email(db, email):
            raise ConflictError("User with this email already exists", field="email")

        role = await self.get_role(db, data.role)
        if role is None:
            raise BadRequestError("Invalid role", field="role")

        profile_data = parse_profile(data.role, data.profile)
        parent_id = getattr(profile_data, "parent_id", None)

        if profile_data is not None:
            taken = await find_profile_conflict(db, data.role, profile_data)
            if taken:
                raise ConflictError(
                    f"{data.role.value} with this {taken} already exists",
                    field=f"profile.{taken}",
                )

        if parent_id is not None and not await self._parent_exists(db, parent_id):
            raise BadRequestError("Parent not found", field="profile.parent_id")

        hashed_password = await run_in_threadpool(get_password_hash, data.password)

        account = Account(email=email, hashed_password=hashed_password, role=role, is_active=True)
        profile = None
        try:
            async with unit_of_work(db):
                db.add(account)
                await db.flush()

                if profile_data is not None:
                    profile = build_profile(data.role, profile_data, account.id)
                    db.add(profile)
                    await db.flush()

                if parent_id is not None:
                    db.add(StudentParent(
                        student_id=profile.id,
                        parent_id=parent_id,
                        relationship=ParentRelationship.GUARDIAN,
                        is_primary=True,
                    ))
                    await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration, or a constraint
            # the pre-checks do not cover
            logger.log_error_with_context(e, "register", email=email)
            if await self.get_account_by_email(db, email):
                raise ConflictError("User with this email already exists", field="email")
            raise InternalError("Registration failed")
        except SQLAlchemyError as e:
            logger.log_error_with_context(e, "register", email=email)
            raise InternalError("Registration failed")

        tokens = issue_token_pair(account.id, account.email, role.name)
        return AuthData(
            **tokens,
            account=AccountResponse.model_validate(account),
            profile=profile_to_response(data.role, profile),
        )

    # ==================== LOGIN / REFRESH / LOGOUT ====================

    async def login(self, db: AsyncSession, email: str, password: str) -> AuthData:
        """
        Check credentials and issue a token pair.

        An unknown email, an inactive account and a wrong password all
        raise the same InvalidCredentialsError.
        """
        account = await self.get_active_account_by_email(db, email)
        if account is None:
            # Unknown and inactive emails still pay one bcrypt check
            await run_in_threadpool(verify_password, password, get_dummy_password_hash())
            raise InvalidCredentialsError()

        if not await run_in_threadpool(verify_password, password, account.hashed_password):
            raise InvalidCredentialsError()

        role = RoleName(account.role_name)
        now = datetime.utcnow()

        profile = await get_profile(db, role, account.id)
        result = AuthData(
            **issue_token_pair(account.id, account.email, role.value),
            account=AccountResponse.model_validate(account).model_copy(update={"last_login": now}),
            profile=profile_to_response(role, profile),
        )

        await self._touch_last_login(db, account.id, now)
        return result

    async def refresh(self, db: AsyncSession, refresh_token: Optional[str]) -> TokenPair:
        """
        Exchange a refresh token for a new pair.

        The new tokens carry the email and role from the presented token;
        only the account's existence and active flag are re-checked.
        """
        if not refresh_token:
            raise BadRequestError("Refresh token is required", field="refresh_token")

        payload = decode_refresh_token(refresh_token)
        account_id = int(payload["sub"])

        if await self.get_active_account(db, account_id) is None:
            raise AuthenticationError("Account not found or inactive")

        return TokenPair(**issue_token_pair(account_id, payload.get("email"), payload.get("role")))

    async def logout(self, db: AsyncSession, account: Account) -> None:
        """Advisory only. Issued tokens stay valid until they expire."""
        await self._touch_last_login(db, account.id, datetime.utcnow())

    async def _touch_last_login(self, db: AsyncSession, account_id: int, when: datetime) -> None:
        """Best-effort timestamp update; failures are logged, never raised"""
        try:
            await db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(last_login=when)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.log_error_with_context(e, "last_login update", account_id=account_id)

    # ==================== PROFILE / PASSWORD ====================

    async def get_account_profile(self, db: AsyncSession, account: Account) -> AccountProfile:
        role = RoleName(account.role_name)
        profile = await get_profile(db, role, account.id)
        return AccountProfile(
            account=AccountResponse.model_validate(account),
            profile=profile_to_response(role, profile),
        )

    async def change_password(
        self,
        db: AsyncSession,
        account: Account,
        data: ChangePasswordRequest
    ) -> None:
        """
        Replace the account's password.

        Raises:
            BadRequestError: current password does not match
        """
        if not await run_in_threadpool(verify_password, data.current_password, account.hashed_password):
            raise BadRequestError("Current password is incorrect", field="current_password")

        account.hashed_password = await run_in_threadpool(get_password_hash, data.new_password)
        account.updated_at = datetime.utcnow()
        await db.commit()


auth_service = AuthService()
