"""
Database module for the School Management API

Contains seed data and database utilities.
"""
from app.db.seed_data import seed_all, ensure_roles, ROLE_DEFINITIONS

__all__ = ["seed_all", "ensure_roles", "ROLE_DEFINITIONS"]
