# Authentication module

from app.modules.auth.dependencies import (
    AuthContext,
    authenticate,
    optional_authenticate,
    get_current_account,
    authorize,
    admin_only,
    teacher_or_admin,
    parent_or_admin,
    student_or_admin,
    owner_or_admin,
)

__all__ = [
    # Identity
    "AuthContext",
    "authenticate",
    "optional_authenticate",
    "get_current_account",
    # Role gates
    "authorize",
    "admin_only",
    "teacher_or_admin",
    "parent_or_admin",
    "student_or_admin",
    "owner_or_admin",
]
