"""
Redis-backed session store and shared cache client
"""

from __future__ import annotations

import json
import secrets
from functools import lru_cache
from typing import Any, Dict, Optional

import redis

from attendance.core.config import settings


@lru_cache(maxsize=1)
def get_redis_client() -> redis.Redis:
    """Shared Redis client for sessions and the Discord profile cache"""
    return redis.from_url(settings.REDIS_URL, decode_responses=True)


class SessionStore:
    """Maps an opaque session id (the cookie value) to the logged-in user"""

    PREFIX = "session:"

    def __init__(self, client: redis.Redis, ttl_seconds: Optional[int] = None):
        self.client = client
        self.ttl_seconds = ttl_seconds or settings.SESSION_TTL_SECONDS

    def _key(self, session_id: str) -> str:
        return f"{self.PREFIX}{session_id}"

    def create(self, user_id: str, **data: Any) -> str:
        session_id = secrets.token_urlsafe(32)
        payload = {"user_id": user_id, **data}
        self.client.set(self._key(session_id), json.dumps(payload), ex=self.ttl_seconds)
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not session_id:
            return None
        raw = self.client.get(self._key(session_id))
        return json.loads(raw) if raw else None

    def destroy(self, session_id: Optional[str]) -> None:
        if session_id:
            self.client.delete(self._key(session_id))


def get_session_store() -> SessionStore:
    return SessionStore(get_redis_client())
