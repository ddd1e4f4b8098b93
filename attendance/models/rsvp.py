"""
RSVP model
"""

import enum
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from attendance.core.db import Base
from attendance.utils.timeutils import utcnow

class RSVPStatus(str, enum.Enum):
    YES = "YES"
    NO = "NO"
    MAYBE = "MAYBE"
    LATE = "LATE"
    ATTENDED = "ATTENDED"

class Rsvp(Base):
    __tablename__ = "rsvps"

    # The composite primary key is what keeps one row per (event, user)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    status = Column(Enum(RSVPStatus), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    event = relationship("Event", back_populates="rsvps")
    user = relationship("User", back_populates="rsvps")
