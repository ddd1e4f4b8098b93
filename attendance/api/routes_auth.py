"""
Authentication routes: Discord sign-in, session status and logout
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from attendance.core.config import settings
from attendance.core.db import get_db
from attendance.core.errors import BadRequestError, UnauthorizedError
from attendance.models import Role
from attendance.schemas.user import AuthStatus
from attendance.services.discord_client import DiscordAPIError, DiscordClient, get_discord_client
from attendance.services.session_store import SessionStore, get_session_store
from attendance.services.user_service import UserService
from attendance.utils.responses import success_response
from attendance.utils.security import get_current_user, get_session_id

logger = logging.getLogger(__name__)

router = APIRouter()

STATE_COOKIE = "discord_oauth_state"

@router.get("/status")
async def auth_status(
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store)
):
    """Session metadata, if a session exists"""
    try:
        user = get_current_user(request, db, store)
    except UnauthorizedError:
        user = None

    roles = list(user.roles) if user else []
    status = AuthStatus(
        is_authenticated=user is not None,
        roles=roles,
        is_admin=Role.ADMIN.value in roles,
    )
    return success_response(message="Auth status", data=status)

@router.get("/discord")
async def discord_signin(discord: DiscordClient = Depends(get_discord_client)):
    """Sign in using discord"""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(discord.authorize_url(state))
    response.set_cookie(STATE_COOKIE, state, max_age=600, httponly=True, samesite="lax")
    return response

@router.get("/discord/callback", response_class=HTMLResponse)
def discord_signin_callback(
    request: Request,
    code: str = "",
    state: str = "",
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    discord: DiscordClient = Depends(get_discord_client)
):
    """Sign in using discord (callback); closes the popup window"""
    expected_state = request.cookies.get(STATE_COOKIE)
    if not code or not expected_state or not secrets.compare_digest(state, expected_state):
        raise BadRequestError("Invalid sign-in attempt")

    try:
        access_token = discord.exchange_code(code)
        profile = discord.current_user(access_token)
        member = discord.member(profile["id"])
    except DiscordAPIError:
        logger.warning("Discord sign-in failed")
        raise UnauthorizedError("Discord sign-in failed")

    user = UserService.login(profile, DiscordClient.roles_for(member), db)
    session_id = store.create(user.id)

    response = HTMLResponse("<script>window.close();</script>")
    response.delete_cookie(STATE_COOKIE)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return response

@router.get("/logout")
async def logout(
    request: Request,
    user=Depends(get_current_user),
    store: SessionStore = Depends(get_session_store)
):
    """Destroy the current session"""
    store.destroy(get_session_id(request))
    response = success_response(message="Signed out")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
