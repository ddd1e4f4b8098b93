"""
Public API routes - no authentication required
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

@router.get("/", response_class=PlainTextResponse)
async def hello_world():
    """A simple hello world just for you."""
    return (
        "Welcome to the Attendance API. It's only accessible to members. "
        "If you're a member, please visit the attendance site to get started."
    )

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}
