"""Create (or reset) an Admin account

Usage:
    python create_admin_user.py --email admin@school.edu --password 'Admin123'
"""
import argparse
import asyncio
import sys

from app.core.database import get_session_local, init_db
from app.core.exceptions import SchoolAPIError
from app.core.security import get_password_hash
from app.db.seed_data import ensure_roles
from app.models.role import RoleName
from app.schemas.auth import RegisterRequest
from app.services.auth_service import auth_service


async def create_admin(request: RegisterRequest) -> int:
    email, password = request.email, request.password
    await init_db()
    session_local = get_session_local()
    async with session_local() as db:
        await ensure_roles(db)

        existing = await auth_service.get_account_by_email(db, email)
        if existing:
            if existing.role_name != RoleName.ADMIN.value:
                print(f"{existing.email} exists with role {existing.role_name}; refusing to change it")
                return 1
            existing.hashed_password = get_password_hash(password)
            existing.is_active = True
            await db.commit()
            print(f"Updated existing admin: {existing.email}")
            return 0

        try:
            result = await auth_service.register(db, request)
        except SchoolAPIError as e:
            print(f"Could not create admin: {e.message}")
            return 1

        print(f"Created admin: {result.account.email} (id {result.account.id})")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or reset an Admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args()

    try:
        request = RegisterRequest(email=args.email, password=args.password, role=RoleName.ADMIN)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    return asyncio.run(create_admin(request))


if __name__ == "__main__":
    sys.exit(main())
