"""
RSVP-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from attendance.models import RSVPStatus
from attendance.utils.timeutils import to_naive_utc

class RsvpResponse(BaseModel):
    """RSVP response schema"""
    event_id: str
    user_id: str
    status: RSVPStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class MinimalUser(BaseModel):
    id: str
    first_name: str
    last_name: str
    roles: List[str]

    model_config = ConfigDict(from_attributes=True)

class RsvpUser(RsvpResponse):
    """RSVP with the owning user, used for event rosters"""
    user: MinimalUser

class UpdateOrCreateRsvp(BaseModel):
    """Set a user's RSVP status for one event"""
    status: RSVPStatus

class UpdateRangeRsvp(BaseModel):
    """Set a user's RSVP status for a set of events

    Either an explicit list of event ids or a date range must be given.
    """
    status: RSVPStatus
    event_ids: Optional[List[str]] = None
    from_date: Optional[datetime] = Field(None, alias="from")
    to_date: Optional[datetime] = Field(None, alias="to")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("from_date", "to_date")
    @classmethod
    def to_utc(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_target(self):
        if self.event_ids is None and (self.from_date is None or self.to_date is None):
            raise ValueError("Provide event_ids or both from and to")
        return self

class ScaninRequest(BaseModel):
    """Scan-in request"""
    code: str = Field(..., min_length=1)
