"""
Custom Exceptions for the School Management API
===============================================

Every error the API reports to a client is one of these. The exception
handlers registered in `app.main` turn them into the standard error body:

    {"success": false, "message": "...", "code": "..."}

Usage:
    from app.core.exceptions import ConflictError

    if existing:
        raise ConflictError("User with this email already exists")
"""

from typing import Optional, Any, Dict


class SchoolAPIError(Exception):
    """Base exception for all School Management API errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication Errors (401)
# ============================================

class AuthenticationError(SchoolAPIError):
    """Caller identity could not be established"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class TokenExpiredError(AuthenticationError):
    """JWT token has expired - client should refresh"""

    def __init__(self, message: str = "Token expired."):
        super().__init__(message)
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """JWT token is malformed, tampered with, or of the wrong type - client should re-login"""

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class AccountNotFoundError(AuthenticationError):
    """Token is valid but its account no longer exists or was deactivated"""

    def __init__(self, message: str = "Invalid token. Account not found."):
        super().__init__(message)
        self.code = "ACCOUNT_NOT_FOUND"


class InvalidCredentialsError(AuthenticationError):
    """Login failed. Never says which half of the credentials was wrong."""

    def __init__(self):
        super().__init__("Invalid email or password")
        self.code = "INVALID_CREDENTIALS"


# ============================================
# Authorization Errors (403)
# ============================================

class AuthorizationError(SchoolAPIError):
    """Caller is authenticated but not allowed to do this"""

    status_code = 403

    def __init__(self, message: str = "Access denied. Insufficient permissions."):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Request Errors (400 / 404 / 409)
# ============================================

class BadRequestError(SchoolAPIError):
    """Input is well-formed JSON but semantically invalid"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[list] = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, code="BAD_REQUEST", details=details)


class ResourceNotFoundError(SchoolAPIError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class AccountResourceNotFoundError(ResourceNotFoundError):
    """Account looked up by an administrator does not exist"""

    def __init__(self, account_id: Any):
        super().__init__("Account", account_id)


class ConflictError(SchoolAPIError):
    """Unique value already taken"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFLICT", details=details)


# ============================================
# Server Errors (500)
# ============================================

class InternalError(SchoolAPIError):
    """Unexpected database or hashing failure. Message is safe to show clients."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: SchoolAPIError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    body: Dict[str, Any] = {
        "success": False,
        "message": error.message,
        "code": error.code,
    }
    if error.details.get("errors"):
        body["errors"] = error.details["errors"]
    return body
