"""
Discord API client: OAuth2 login, guild member lookup and role mapping
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx
import redis

from attendance.core.config import settings
from attendance.models import Role
from attendance.services.session_store import get_redis_client

logger = logging.getLogger(__name__)


class DiscordAPIError(Exception):
    """Raised when a Discord API call fails"""


class DiscordClient:
    """Thin wrapper over the Discord REST API.

    Guild member lookups are cached in Redis for
    ``DISCORD_MEMBER_CACHE_SECONDS`` when a cache client is given.
    """

    AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
    SCOPES = "identify email guilds.members.read"

    def __init__(self, cache: Optional[redis.Redis] = None, http_client: Optional[httpx.Client] = None):
        self.cache = cache
        self.http = http_client or httpx.Client(
            base_url=settings.DISCORD_API_URL,
            timeout=settings.DISCORD_TIMEOUT_SECONDS,
        )

    def authorize_url(self, state: str) -> str:
        query = urlencode({
            "client_id": settings.DISCORD_CLIENT_ID,
            "redirect_uri": settings.DISCORD_CALLBACK_URL,
            "response_type": "code",
            "scope": self.SCOPES,
            "state": state,
        })
        return f"{self.AUTHORIZE_URL}?{query}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Discord API {method} {path} failed: {e}")
            raise DiscordAPIError(str(e)) from e
        return response.json()

    def exchange_code(self, code: str) -> str:
        """Trade an OAuth2 authorization code for an access token"""
        token = self._request(
            "POST",
            "/oauth2/token",
            data={
                "client_id": settings.DISCORD_CLIENT_ID,
                "client_secret": settings.DISCORD_CLIENT_SECRET,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": settings.DISCORD_CALLBACK_URL,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        return token["access_token"]

    def current_user(self, access_token: str) -> Dict[str, Any]:
        return self._request("GET", "/users/@me", headers={"Authorization": f"Bearer {access_token}"})

    def member(self, user_id: str) -> Dict[str, Any]:
        """Guild member details (roles, nick, user.avatar) for ``user_id``"""
        cache_key = f"discord:member:{user_id}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached:
                return json.loads(cached)

        member = self._request(
            "GET",
            f"/guilds/{settings.GUILD_ID}/members/{user_id}",
            headers={"Authorization": f"Bot {settings.DISCORD_BOT_TOKEN}"},
        )

        if self.cache is not None:
            self.cache.set(cache_key, json.dumps(member), ex=settings.DISCORD_MEMBER_CACHE_SECONDS)
        return member

    @staticmethod
    def roles_for(member: Dict[str, Any]) -> List[str]:
        """Map guild role ids to application roles"""
        discord_roles = set(member.get("roles", []))
        roles = [Role.MEMBER.value]
        if settings.MENTOR_ROLE_ID and settings.MENTOR_ROLE_ID in discord_roles:
            roles.append(Role.MENTOR.value)
        if settings.ADMIN_ROLE_ID and settings.ADMIN_ROLE_ID in discord_roles:
            roles.append(Role.ADMIN.value)
        return roles

    def avatar(self, user_id: str) -> Optional[str]:
        member = self.member(user_id)
        return member.get("avatar") or (member.get("user") or {}).get("avatar")


@lru_cache(maxsize=1)
def get_discord_client() -> DiscordClient:
    return DiscordClient(cache=get_redis_client())
