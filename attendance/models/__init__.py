"""
Database models package
"""

from .user import User, Role
from .event import Event, EventType
from .rsvp import Rsvp, RSVPStatus
from .scancode import Scancode

__all__ = ["User", "Role", "Event", "EventType", "Rsvp", "RSVPStatus", "Scancode"]
