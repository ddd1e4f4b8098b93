"""
Event model
"""

import enum
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, Enum
from sqlalchemy.orm import relationship

from attendance.core.db import Base
from attendance.utils.timeutils import utcnow

class EventType(str, enum.Enum):
    SOCIAL = "Social"
    REGULAR = "Regular"
    OUTREACH = "Outreach"

class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)
    all_day = Column(Boolean, nullable=False, default=False)
    type = Column(Enum(EventType, values_callable=lambda e: [m.value for m in e]), nullable=False, default=EventType.REGULAR)
    # base32 TOTP secret, never serialized
    secret = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    rsvps = relationship("Rsvp", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)
