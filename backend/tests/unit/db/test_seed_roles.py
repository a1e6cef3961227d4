"""
Unit Tests for role seeding
"""
import pytest
from sqlalchemy import select, func

from app.db.seed_data import ensure_roles, ROLE_DEFINITIONS
from app.models.role import Role, RoleName


@pytest.mark.asyncio
async def test_roles_seeded(db_session):
    names = (await db_session.execute(select(Role.name))).scalars().all()

    assert sorted(names) == sorted(r.value for r in RoleName)


@pytest.mark.asyncio
async def test_ensure_roles_is_idempotent(db_session):
    first = await ensure_roles(db_session)
    second = await ensure_roles(db_session)

    assert [r.id for r in first] == [r.id for r in second]
    assert (await db_session.execute(select(func.count(Role.id)))).scalar() == len(RoleName)


@pytest.mark.asyncio
async def test_ensure_roles_restores_missing_role(db_session):
    parent = (await db_session.execute(select(Role).where(Role.name == "Parent"))).scalar_one()
    await db_session.delete(parent)
    await db_session.commit()

    roles = await ensure_roles(db_session)

    assert [r.name for r in roles] == ["Admin", "Teacher", "Parent", "Student"]
    assert roles[2].permissions == ROLE_DEFINITIONS[RoleName.PARENT]["permissions"]
