"""
Scancode model
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from attendance.core.db import Base
from attendance.utils.timeutils import utcnow

class Scancode(Base):
    __tablename__ = "scancodes"

    code = Column(String(255), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    user = relationship("User", back_populates="scancodes")
