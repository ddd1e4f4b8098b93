"""
Request pipeline stages: session authentication, role checks and rate limiting
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
import time
from typing import Optional

from attendance.core.config import settings
from attendance.core.db import get_db
from attendance.core.errors import ForbiddenError, UnauthorizedError
from attendance.models import Role, User
from attendance.services.repositories import UserRepo
from attendance.services.session_store import SessionStore, get_session_store
from attendance.utils.responses import rate_limit_error

# Simple in-memory rate limiter: key -> request timestamps
rate_limiter = {}

def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)

def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store)
) -> User:
    """Resolve the session cookie to a user, or reject the request"""
    session = store.get(get_session_id(request))
    if not session:
        raise UnauthorizedError("Not signed in")

    user = UserRepo.get(db, session["user_id"])
    if not user:
        store.destroy(get_session_id(request))
        raise UnauthorizedError("Not signed in")
    return user

def require_roles(*roles: Role):
    """Dependency factory: the user must hold one of ``roles`` (ADMIN holds all)"""
    def checker(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(*roles):
            raise ForbiddenError("Insufficient role")
        return user
    return checker

require_mentor = require_roles(Role.MENTOR)

def rate_limit_check(key: str, limit: Optional[int] = None) -> bool:
    """Simple sliding one-minute rate limiting by key"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Evict keys with no request in the last minute
    stale = [k for k, times in rate_limiter.items() if not times or times[-1] <= minute_ago]
    for k in stale:
        del rate_limiter[k]

    # Clean old requests
    recent = [req_time for req_time in rate_limiter.get(key, []) if req_time > minute_ago]

    # Check limit
    if len(recent) >= limit:
        rate_limiter[key] = recent
        return False

    # Add current request
    recent.append(current_time)
    rate_limiter[key] = recent
    return True

def check_in_rate_limit(user: User = Depends(get_current_user)) -> None:
    """Dependency guarding the check-in endpoints against code guessing.

    Counted per signed-in user; client-supplied headers play no part.
    """
    if not rate_limit_check(f"user:{user.id}"):
        rate_limit_error()
