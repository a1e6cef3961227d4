"""
Profile Registry - which profile row each role gets at registration

Every RoleName has an entry. Admin maps to None: administrators are
accounts without a profile row.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.core.exceptions import BadRequestError
from app.models.profile import Student, Teacher, Parent
from app.models.role import RoleName
from app.schemas.profile import (
    StudentProfileCreate,
    TeacherProfileCreate,
    ParentProfileCreate,
    StudentProfileResponse,
    TeacherProfileResponse,
    ParentProfileResponse,
)


@dataclass(frozen=True)
class ProfileVariant:
    """How one role's profile is validated, stored and rendered"""
    model: Type[Base]
    create_schema: Type[BaseModel]
    response_schema: Type[BaseModel]
    # Columns that must be unique across all profiles of this kind
    unique_fields: tuple = ()


PROFILE_VARIANTS: Dict[RoleName, Optional[ProfileVariant]] = {
    RoleName.ADMIN: None,
    RoleName.TEACHER: ProfileVariant(
        model=Teacher,
        create_schema=TeacherProfileCreate,
        response_schema=TeacherProfileResponse,
        unique_fields=("employee_id",),
    ),
    RoleName.PARENT: ProfileVariant(
        model=Parent,
        create_schema=ParentProfileCreate,
        response_schema=ParentProfileResponse,
    ),
    RoleName.STUDENT: ProfileVariant(
        model=Student,
        create_schema=StudentProfileCreate,
        response_schema=StudentProfileResponse,
        unique_fields=("student_id", "admission_number"),
    ),
}

_missing = set(RoleName) - set(PROFILE_VARIANTS)
if _missing:
    raise RuntimeError(f"No profile variant registered for roles: {sorted(r.value for r in _missing)}")


def get_variant(role: RoleName) -> Optional[ProfileVariant]:
    return PROFILE_VARIANTS[role]


def _format_errors(exc: ValidationError) -> list:
    return [
        {
            "field": ".".join(["profile", *(str(part) for part in error["loc"])]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]


def parse_profile(role: RoleName, data: Optional[Dict[str, Any]]) -> Optional[BaseModel]:
    """
    Validate the registration `profile` object against the role's schema.

    Returns None for roles without a profile. Anything sent for such a
    role is ignored.

    Raises:
        BadRequestError: profile missing, or invalid for the role
    """
    variant = get_variant(role)
    if variant is None:
        return None
    if data is None:
        raise BadRequestError(
            f"Profile is required for role {role.value}",
            field="profile",
        )

    try:
        profile = variant.create_schema.model_validate(data)
    except ValidationError as exc:
        raise BadRequestError(
            f"Invalid {role.value.lower()} profile",
            field="profile",
            errors=_format_errors(exc),
        )

    if isinstance(profile, StudentProfileCreate) and not profile.student_id:
        profile.student_id = profile.admission_number

    return profile


async def find_profile_conflict(
    db: AsyncSession,
    role: RoleName,
    profile: BaseModel
) -> Optional[str]:
    """Return the first unique profile field whose value is already taken"""
    variant = get_variant(role)
    if variant is None:
        return None

    for field in variant.unique_fields:
        value = getattr(profile, field)
        column = getattr(variant.model, field)
        result = await db.execute(select(variant.model.id).where(column == value))
        if result.scalar_one_or_none() is not None:
            return field
    return None


def build_profile(role: RoleName, profile: BaseModel, account_id: int) -> Base:
    """Build (but do not add) the profile row for a new account"""
    variant = get_variant(role)
    values = profile.model_dump(exclude={"parent_id"})
    return variant.model(user_id=account_id, **values)


async def get_profile(db: AsyncSession, role: RoleName, account_id: int) -> Optional[Base]:
    """Load an account's profile row, if its role has one"""
    variant = get_variant(role)
    if variant is None:
        return None
    result = await db.execute(
        select(variant.model).where(variant.model.user_id == account_id)
    )
    return result.scalar_one_or_none()


def profile_to_response(role: RoleName, profile: Optional[Base]) -> Optional[BaseModel]:
    variant = get_variant(role)
    if variant is None or profile is None:
        return None
    return variant.response_schema.model_validate(profile)
