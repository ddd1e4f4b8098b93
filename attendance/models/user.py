"""
User model
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, JSON
from sqlalchemy.orm import relationship

from attendance.core.db import Base
from attendance.models.rsvp import RSVPStatus
from attendance.utils.timeutils import utcnow

class Role(str, enum.Enum):
    MEMBER = "MEMBER"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"

class User(Base):
    __tablename__ = "users"

    # Discord snowflake
    id = Column(String(32), primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=True)
    roles = Column(JSON, nullable=False, default=list)
    default_status = Column(Enum(RSVPStatus), nullable=True)
    calendar_secret = Column(String(36), nullable=False, default=lambda: str(uuid.uuid4()))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    rsvps = relationship("Rsvp", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    scancodes = relationship("Scancode", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def has_role(self, *roles: str) -> bool:
        held = set(self.roles or [])
        if Role.ADMIN.value in held:
            return True
        return any(Role(role).value in held for role in roles)
