# API endpoints
from . import auth, accounts

__all__ = ["auth", "accounts"]
