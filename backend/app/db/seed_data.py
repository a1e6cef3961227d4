"""
Database Seed Data Module

Reference data the API cannot run without: the four roles.
Run with: python -m app.db.seed_data
"""
import asyncio
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import AsyncSessionLocal, init_db
from app.core.logging_config import logger
from app.models.role import Role, RoleName


# ==================== Role Definitions ====================

ROLE_DEFINITIONS: Dict[RoleName, Dict] = {
    RoleName.ADMIN: {
        "description": "System administrator with full access",
        "permissions": {"all": True},
    },
    RoleName.TEACHER: {
        "description": "Teacher with access to classes, attendance and grading",
        "permissions": {
            "students": ["read"],
            "attendance": ["read", "write"],
            "exams": ["read", "write"],
            "grades": ["read", "write"],
        },
    },
    RoleName.PARENT: {
        "description": "Parent or guardian with access to their children's records",
        "permissions": {
            "children": ["read"],
            "payments": ["read", "write"],
        },
    },
    RoleName.STUDENT: {
        "description": "Student with access to their own records",
        "permissions": {
            "self": ["read"],
        },
    },
}


async def ensure_roles(db: AsyncSession) -> List[Role]:
    """
    Insert any missing role rows. Safe to run on every startup.

    Returns:
        All four Role rows.
    """
    result = await db.execute(select(Role))
    existing = {role.name: role for role in result.scalars().all()}

    created = []
    for role_name, definition in ROLE_DEFINITIONS.items():
        if role_name.value in existing:
            continue
        role = Role(
            name=role_name.value,
            description=definition["description"],
            permissions=definition["permissions"],
        )
        db.add(role)
        existing[role_name.value] = role
        created.append(role_name.value)

    if created:
        await db.commit()
        logger.info(f"[Seed] Created roles: {', '.join(created)}")

    return [existing[role_name.value] for role_name in RoleName]


async def seed_all() -> None:
    """Create tables and seed reference data"""
    await init_db()
    async with AsyncSessionLocal() as db:
        await ensure_roles(db)


if __name__ == "__main__":
    asyncio.run(seed_all())
