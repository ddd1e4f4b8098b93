"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from attendance.models import EventType
from attendance.utils.timeutils import to_naive_utc

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    start_date: datetime
    end_date: datetime
    all_day: bool = False
    type: EventType = EventType.REGULAR

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class EventUpdate(BaseModel):
    """Schema for updating an event"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    all_day: Optional[bool] = None
    type: Optional[EventType] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def to_utc(cls, value):
        return to_naive_utc(value)

class EventResponse(BaseModel):
    """Event as returned to clients; the secret is never included"""
    id: str
    title: str
    description: str
    start_date: datetime
    end_date: datetime
    all_day: bool
    type: EventType

    model_config = ConfigDict(from_attributes=True)

class EventSecret(BaseModel):
    """Check-in material for mentors running an event"""
    id: str
    secret: str
    code: str
    callback_url: str
