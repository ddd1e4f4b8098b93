"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .rsvp import *
from .scancode import *
from .user import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventSecret",
    "RsvpResponse",
    "RsvpUser",
    "MinimalUser",
    "UpdateOrCreateRsvp",
    "UpdateRangeRsvp",
    "ScaninRequest",
    "ScancodeCreate",
    "ScancodeResponse",
    "UserResponse",
    "UserUpdate",
    "OutreachReport",
    "AuthStatus",
]
