"""
User-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr

from attendance.models import RSVPStatus
from attendance.schemas.event import EventResponse

class UserResponse(BaseModel):
    """User response schema"""
    id: str
    username: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    roles: List[str]
    default_status: Optional[RSVPStatus] = None
    calendar_secret: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserUpdate(BaseModel):
    """Schema for updating a user"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    default_status: Optional[RSVPStatus] = None

class OutreachReport(BaseModel):
    """Outreach attendance of one user over a date range"""
    user_id: str
    from_date: datetime
    to_date: datetime
    event_count: int
    hours: float
    events: List[EventResponse]

class AuthStatus(BaseModel):
    """The authentication status metadata"""
    is_authenticated: bool
    roles: List[str]
    is_admin: bool
