# Re-export all models for convenient imports
from app.models.role import Role, RoleName
from app.models.account import Account
from app.models.profile import (
    Student,
    Teacher,
    Parent,
    StudentParent,
    Gender,
    ParentRelationship,
)

__all__ = [
    # Identity
    "Role",
    "RoleName",
    "Account",
    # Profiles
    "Student",
    "Teacher",
    "Parent",
    "StudentParent",
    "Gender",
    "ParentRelationship",
]
