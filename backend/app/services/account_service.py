"""
Account Service - administration of existing accounts

Accounts are never deleted. Deactivation is the soft delete, and it takes
effect on the account's next request because authentication re-checks
the active flag.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from datetime import datetime
from typing import Optional, Tuple, List

from app.core.exceptions import AccountResourceNotFoundError, BadRequestError
from app.core.logging_config import logger
from app.models.account import Account
from app.models.profile import Student
from app.models.role import Role, RoleName
from app.schemas.account import StudentDirectoryEntry
from app.schemas.auth import AccountResponse, AccountProfile
from app.schemas.profile import StudentProfileResponse
from app.services.profiles import get_profile, profile_to_response


class AccountService:
    """Service for account administration"""

    async def list_accounts(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        role: Optional[RoleName] = None,
        is_active: Optional[bool] = None
    ) -> Tuple[List[AccountResponse], int]:
        """
        List accounts, newest first.

        Returns:
            (accounts on this page, total matching accounts)
        """
        query = select(Account)
        count_query = select(func.count(Account.id))

        if role is not None:
            query = query.join(Role, Account.role_id == Role.id).where(Role.name == role.value)
            count_query = count_query.join(Role, Account.role_id == Role.id).where(Role.name == role.value)
        if is_active is not None:
            query = query.where(Account.is_active == is_active)
            count_query = count_query.where(Account.is_active == is_active)

        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(Account.created_at.desc(), Account.id.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)
        accounts = result.unique().scalars().all()

        return [AccountResponse.model_validate(a) for a in accounts], total

    async def list_students(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None
    ) -> Tuple[List[StudentDirectoryEntry], int]:
        """Student directory ordered by name, optionally filtered by name or admission number"""
        query = select(Student, Account).join(Account, Student.user_id == Account.id)
        count_query = select(func.count(Student.id))

        if search:
            pattern = f"%{search}%"
            condition = or_(
                Student.first_name.ilike(pattern),
                Student.last_name.ilike(pattern),
                Student.admission_number.ilike(pattern),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(Student.last_name, Student.first_name, Student.id)
        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await db.execute(query)

        entries = [
            StudentDirectoryEntry(
                account_id=account.id,
                email=account.email,
                is_active=account.is_active,
                profile=StudentProfileResponse.model_validate(student),
            )
            for student, account in result.unique().all()
        ]
        return entries, total

    async def get_account(self, db: AsyncSession, account_id: int) -> Account:
        result = await db.execute(select(Account).where(Account.id == account_id))
        account = result.scalar_one_or_none()
        if account is None:
            raise AccountResourceNotFoundError(account_id)
        return account

    async def get_account_detail(self, db: AsyncSession, account_id: int) -> AccountProfile:
        account = await self.get_account(db, account_id)
        role = RoleName(account.role_name)
        profile = await get_profile(db, role, account.id)
        return AccountProfile(
            account=AccountResponse.model_validate(account),
            profile=profile_to_response(role, profile),
        )

    async def set_account_active(
        self,
        db: AsyncSession,
        account_id: int,
        is_active: bool,
        acting_account_id: int
    ) -> AccountResponse:
        """
        Deactivate or reactivate an account.

        Raises:
            AccountResourceNotFoundError: no such account
            BadRequestError: an admin tried to deactivate their own account
        """
        if not is_active and account_id == acting_account_id:
            raise BadRequestError("You cannot deactivate your own account")

        account = await self.get_account(db, account_id)
        if account.is_active != is_active:
            account.is_active = is_active
            account.updated_at = datetime.utcnow()
            await db.commit()
            logger.info(
                f"Account {account_id} {'activated' if is_active else 'deactivated'} by {acting_account_id}",
                extra={"event_type": "account_status", "target_account_id": account_id}
            )

        return AccountResponse.model_validate(account)


account_service = AccountService()
