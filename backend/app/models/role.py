from sqlalchemy import Column, String, Integer, DateTime, JSON
from datetime import datetime
import enum

from app.core.database import Base


class RoleName(str, enum.Enum):
    """The closed set of roles. Values match `roles.name` rows."""
    ADMIN = "Admin"
    TEACHER = "Teacher"
    PARENT = "Parent"
    STUDENT = "Student"


class Role(Base):
    """Role reference data - seeded at startup, never edited by the API"""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(255), nullable=True)
    # Informational only; the authorization gate checks `name`
    permissions = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Role {self.name}>"
