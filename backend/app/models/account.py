from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.database import Base


class Account(Base):
    """Login identity. Deactivated, never deleted."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Always stored lower-cased; see app.schemas.auth.normalize_email
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Joined eagerly: async sessions cannot lazy-load
    role = relationship("Role", lazy="joined")

    @property
    def role_name(self) -> str:
        return self.role.name

    def __repr__(self):
        return f"<Account {self.email}>"
