"""
Tests for the session store and the Discord client
"""

import json

import httpx
import pytest

from attendance.core.config import settings
from attendance.services.discord_client import DiscordAPIError, DiscordClient
from attendance.services.session_store import SessionStore

class FakeRedis:
    """Just enough of the redis client API for the store and the cache"""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex

    def get(self, key):
        return self.data.get(key)

    def delete(self, key):
        self.data.pop(key, None)

def test_session_round_trip():
    redis_client = FakeRedis()
    store = SessionStore(redis_client, ttl_seconds=60)

    session_id = store.create("100")

    assert store.get(session_id) == {"user_id": "100"}
    assert redis_client.expiry[f"session:{session_id}"] == 60

    store.destroy(session_id)
    assert store.get(session_id) is None

def test_session_ttl_defaults_to_settings():
    store = SessionStore(FakeRedis())
    assert store.ttl_seconds == settings.SESSION_TTL_SECONDS

def test_session_lookup_without_cookie():
    store = SessionStore(FakeRedis())
    assert store.get(None) is None
    assert store.get("unknown") is None

def make_client(handler, cache=None):
    http = httpx.Client(base_url="https://discord.test/api", transport=httpx.MockTransport(handler))
    return DiscordClient(cache=cache, http_client=http)

def test_member_lookup_is_cached():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        assert request.headers["Authorization"].startswith("Bot ")
        return httpx.Response(200, json={"roles": ["r1"], "user": {"id": "100", "avatar": "abc"}})

    cache = FakeRedis()
    client = make_client(handler, cache=cache)

    assert client.member("100")["roles"] == ["r1"]
    assert client.avatar("100") == "abc"
    assert len(calls) == 1
    assert json.loads(cache.get("discord:member:100"))["roles"] == ["r1"]

def test_exchange_code_and_current_user():
    def handler(request):
        if request.url.path.endswith("/oauth2/token"):
            assert b"code=abc" in request.content
            return httpx.Response(200, json={"access_token": "tok"})
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"id": "100", "username": "ada"})

    client = make_client(handler)

    token = client.exchange_code("abc")
    assert client.current_user(token)["username"] == "ada"

def test_http_errors_become_discord_api_errors():
    client = make_client(lambda request: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(DiscordAPIError):
        client.member("100")

def test_roles_for_maps_guild_roles(monkeypatch):
    monkeypatch.setattr(settings, "MENTOR_ROLE_ID", "mentor-role")
    monkeypatch.setattr(settings, "ADMIN_ROLE_ID", "admin-role")

    assert DiscordClient.roles_for({"roles": []}) == ["MEMBER"]
    assert DiscordClient.roles_for({"roles": ["mentor-role"]}) == ["MEMBER", "MENTOR"]
    assert DiscordClient.roles_for({"roles": ["mentor-role", "admin-role"]}) == ["MEMBER", "MENTOR", "ADMIN"]

def test_authorize_url_carries_state():
    client = make_client(lambda request: httpx.Response(200))
    url = client.authorize_url("xyz")
    assert url.startswith(DiscordClient.AUTHORIZE_URL)
    assert "state=xyz" in url
