"""
User API routes: profiles, RSVPs, outreach reports and scancodes
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from attendance.core.config import settings
from attendance.core.db import get_db
from attendance.core.errors import BadRequestError
from attendance.models import User
from attendance.schemas.rsvp import RsvpResponse
from attendance.schemas.scancode import ScancodeCreate, ScancodeResponse
from attendance.schemas.user import UserResponse, UserUpdate
from attendance.services.discord_client import DiscordAPIError, DiscordClient, get_discord_client
from attendance.services.rsvp_service import RsvpService
from attendance.services.scancode_service import ScancodeService
from attendance.services.session_store import SessionStore, get_session_store
from attendance.services.user_service import UserService
from attendance.utils.responses import success_response
from attendance.utils.security import get_current_user, get_session_id, require_mentor
from attendance.utils.timeutils import to_naive_utc

router = APIRouter(dependencies=[Depends(get_current_user)])

def _user(user: User):
    return UserResponse.model_validate(user)

def _avatar(user_id: str, discord: DiscordClient):
    try:
        return discord.avatar(user_id)
    except DiscordAPIError:
        raise BadRequestError("Could not load the Discord profile")

# -------- Signed-in user --------

@router.get("/me")
async def get_me(user: User = Depends(get_current_user)):
    """Get the currently authenticated user"""
    return success_response(message="User retrieved", data=_user(user))

@router.patch("/me")
async def edit_me(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Edit the signed-in user"""
    updated = UserService.update_user(user.id, user_update, db)
    return success_response(message="User updated", data=_user(updated))

@router.delete("/me")
async def delete_me(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store)
):
    """Delete the signed in user and end their session"""
    store.destroy(get_session_id(request))
    deleted = UserService.delete_user(user.id, db)
    response = success_response(message="User deleted", data=_user(deleted))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response

@router.get("/me/avatar")
def get_me_avatar(
    user: User = Depends(get_current_user),
    discord: DiscordClient = Depends(get_discord_client)
):
    """Get the currently authenticated user's avatar id"""
    return success_response(message="Avatar retrieved", data=_avatar(user.id, discord))

@router.get("/me/rsvp")
async def get_me_rsvps(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Get the RSVPs of the logged in user"""
    rsvps = RsvpService.list_rsvps_for_user(user.id, db)
    return success_response(message="RSVPs retrieved", data=[RsvpResponse.model_validate(r) for r in rsvps])

@router.post("/me/regenerateToken", status_code=201)
async def regenerate_me_calendar_token(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Regenerates the calendar token of the signed in user"""
    updated = UserService.regenerate_calendar_secret(user.id, db)
    return success_response(message="Calendar token regenerated", data=_user(updated), status_code=201)

@router.get("/me/outreach")
async def get_me_outreach_report(
    from_date: datetime = Query(..., alias="from"),
    to_date: datetime = Query(..., alias="to"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Get an outreach report of the logged in user"""
    report = UserService.outreach_report(user.id, to_naive_utc(from_date), to_naive_utc(to_date), db)
    return success_response(message="Outreach report", data=report)

@router.get("/me/scancodes")
async def get_me_scancodes(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Get a list of the logged in user's scancodes"""
    scancodes = ScancodeService.list_scancodes_for_user(user.id, db)
    return success_response(message="Scancodes retrieved", data=[ScancodeResponse.model_validate(s) for s in scancodes])

@router.post("/me/scancodes", status_code=201)
async def create_me_scancode(
    body: ScancodeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Create a scancode for the logged in user"""
    scancode = ScancodeService.create_scancode(user.id, body.code, db)
    return success_response(message="Scancode created", data=ScancodeResponse.model_validate(scancode), status_code=201)

@router.delete("/me/scancodes/{code}")
async def delete_me_scancode(
    code: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Delete a scancode for the logged in user"""
    scancode = ScancodeService.delete_scancode(code, requester_id=user.id, is_privileged=False, db=db)
    return success_response(message="Scancode deleted", data=ScancodeResponse.model_validate(scancode))

# -------- Any user (mentors) --------

@router.get("")
async def get_users(db: Session = Depends(get_db), mentor: User = Depends(require_mentor)):
    """Get a list of all users"""
    users = UserService.list_users(db)
    return success_response(message="Users retrieved", data=[_user(u) for u in users])

@router.get("/{user_id}")
async def get_user(user_id: str, db: Session = Depends(get_db), mentor: User = Depends(require_mentor)):
    """Get a specific user"""
    return success_response(message="User retrieved", data=_user(UserService.get_user(user_id, db)))

@router.patch("/{user_id}")
async def edit_user(
    user_id: str,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Edit a user"""
    updated = UserService.update_user(user_id, user_update, db)
    return success_response(message="User updated", data=_user(updated))

@router.delete("/{user_id}")
async def delete_user(user_id: str, db: Session = Depends(get_db), mentor: User = Depends(require_mentor)):
    """Delete a user"""
    deleted = UserService.delete_user(user_id, db)
    return success_response(message="User deleted", data=_user(deleted))

@router.get("/{user_id}/avatar")
def get_user_avatar(
    user_id: str,
    mentor: User = Depends(require_mentor),
    discord: DiscordClient = Depends(get_discord_client)
):
    """Get a user's discord avatar id"""
    return success_response(message="Avatar retrieved", data=_avatar(user_id, discord))

@router.get("/{user_id}/rsvp")
async def get_user_rsvps(user_id: str, db: Session = Depends(get_db), mentor: User = Depends(require_mentor)):
    """Get a user's RSVPs"""
    rsvps = RsvpService.list_rsvps_for_user(user_id, db)
    return success_response(message="RSVPs retrieved", data=[RsvpResponse.model_validate(r) for r in rsvps])

@router.post("/{user_id}/regenerateToken", status_code=201)
async def regenerate_user_calendar_token(
    user_id: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Regenerates the calendar token of the specified user"""
    updated = UserService.regenerate_calendar_secret(user_id, db)
    return success_response(message="Calendar token regenerated", data=_user(updated), status_code=201)

@router.get("/{user_id}/outreach")
async def get_user_outreach_report(
    user_id: str,
    from_date: datetime = Query(..., alias="from"),
    to_date: datetime = Query(..., alias="to"),
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Get an outreach report of the specified user"""
    report = UserService.outreach_report(user_id, to_naive_utc(from_date), to_naive_utc(to_date), db)
    return success_response(message="Outreach report", data=report)

@router.get("/{user_id}/scancodes")
async def get_user_scancodes(user_id: str, db: Session = Depends(get_db), mentor: User = Depends(require_mentor)):
    """Get a list of the specified user's scancodes"""
    scancodes = ScancodeService.list_scancodes_for_user(user_id, db)
    return success_response(message="Scancodes retrieved", data=[ScancodeResponse.model_validate(s) for s in scancodes])

@router.post("/{user_id}/scancodes", status_code=201)
async def create_user_scancode(
    user_id: str,
    body: ScancodeCreate,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Create a scancode for the specified user"""
    scancode = ScancodeService.create_scancode(user_id, body.code, db)
    return success_response(message="Scancode created", data=ScancodeResponse.model_validate(scancode), status_code=201)

@router.delete("/{user_id}/scancodes/{code}")
async def delete_user_scancode(
    user_id: str,
    code: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Delete a scancode for the specified user"""
    scancode = ScancodeService.delete_scancode(
        code, requester_id=mentor.id, is_privileged=True, db=db, owner_id=user_id
    )
    return success_response(message="Scancode deleted", data=ScancodeResponse.model_validate(scancode))
