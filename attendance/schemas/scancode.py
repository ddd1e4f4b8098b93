"""
Scancode-related Pydantic schemas
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class ScancodeCreate(BaseModel):
    """Schema for creating a scancode"""
    code: str = Field(..., min_length=1, max_length=255)

class ScancodeResponse(BaseModel):
    """Scancode response schema"""
    code: str
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
