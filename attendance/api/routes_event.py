"""
Event API routes: events, RSVPs and check-in
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.orm import Session

from attendance.core.config import settings
from attendance.core.db import get_db
from attendance.models import User
from attendance.schemas.event import EventCreate, EventResponse, EventUpdate
from attendance.schemas.rsvp import (
    RsvpResponse,
    RsvpUser,
    ScaninRequest,
    UpdateOrCreateRsvp,
    UpdateRangeRsvp,
)
from attendance.services.checkin_service import CheckInService
from attendance.services.event_service import EventService
from attendance.services.excel_service import ExcelService
from attendance.services.rsvp_service import RsvpService
from attendance.utils.responses import success_response
from attendance.utils.security import check_in_rate_limit, get_current_user, require_mentor
from attendance.utils.timeutils import to_naive_utc

router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("")
async def get_events(
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    take: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Get all events overlapping the given range"""
    events = EventService.list_events(
        db, from_date=to_naive_utc(from_date), to_date=to_naive_utc(to_date), take=take
    )
    return success_response(
        message="Events retrieved successfully",
        data=[EventResponse.model_validate(event) for event in events]
    )

@router.post("", status_code=201)
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Create a new event"""
    event = EventService.create_event(event_data, db)
    return success_response(
        message="Event created successfully",
        data=EventResponse.model_validate(event),
        status_code=201
    )

@router.post("/rsvps", status_code=201)
async def set_events_rsvp(
    update_range: UpdateRangeRsvp,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Update RSVP status of every event in a range (or an explicit id list)"""
    if update_range.event_ids is not None:
        rsvps = RsvpService.upsert_range_rsvp(user.id, update_range.event_ids, update_range.status, db)
    else:
        rsvps = RsvpService.upsert_rsvps_in_range(
            user.id, update_range.from_date, update_range.to_date, update_range.status, db
        )
    return success_response(
        message=f"{len(rsvps)} RSVPs updated",
        data=[RsvpResponse.model_validate(rsvp) for rsvp in rsvps],
        status_code=201
    )

@router.get("/{event_id}")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    """Get a specific event"""
    event = EventService.get_event(event_id, db)
    return success_response(message="Event retrieved", data=EventResponse.model_validate(event))

@router.patch("/{event_id}")
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Update an event"""
    event = EventService.update_event(event_id, event_update, db)
    return success_response(message="Event updated successfully", data=EventResponse.model_validate(event))

@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Delete an event"""
    event = EventService.delete_event(event_id, db)
    return success_response(message="Event deleted successfully", data=EventResponse.model_validate(event))

@router.get("/{event_id}/token")
async def get_event_secret(
    event_id: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Get a specific event's secret and current check-in code"""
    secret = EventService.get_event_secret(event_id, db)
    return success_response(message="Event secret retrieved", data=secret)

@router.get("/{event_id}/token/qr.png")
async def get_event_token_qr(
    event_id: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """QR code of the current check-in callback URL"""
    qr_bytes = EventService.event_token_qr(event_id, db)
    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Cache-Control": "no-store"}
    )

@router.get("/{event_id}/token/callback", dependencies=[Depends(check_in_rate_limit)])
async def event_token_callback(
    event_id: str,
    code: str = "",
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Callback for a scanned token; redirects to the calendar"""
    CheckInService.verify_event_token(event_id, user.id, code, db)
    return RedirectResponse(f"{settings.FRONTEND_URL}/calendar", status_code=302)

@router.post("/{event_id}/token/callback", status_code=201, dependencies=[Depends(check_in_rate_limit)])
async def event_token_post_callback(
    event_id: str,
    code: str = "",
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Callback for a valid code (client input)"""
    rsvp = CheckInService.verify_event_token(event_id, user.id, code, db)
    return success_response(
        message="Checked in",
        data=RsvpResponse.model_validate(rsvp),
        status_code=201
    )

@router.get("/{event_id}/rsvp")
async def get_event_rsvp(
    event_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Get the logged in user's RSVP status for an event"""
    rsvp = RsvpService.get_rsvp(event_id, user.id, db)
    return success_response(message="RSVP retrieved", data=RsvpResponse.model_validate(rsvp))

@router.post("/{event_id}/rsvp", status_code=201)
async def set_event_rsvp(
    event_id: str,
    rsvp_data: UpdateOrCreateRsvp,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Set the logged in user's RSVP status for an event"""
    rsvp = RsvpService.upsert_rsvp(event_id, user.id, rsvp_data.status, db)
    return success_response(
        message="RSVP saved",
        data=RsvpResponse.model_validate(rsvp),
        status_code=201
    )

@router.get("/{event_id}/rsvps")
async def get_event_rsvps(event_id: str, db: Session = Depends(get_db)):
    """Get an event's associated RSVPs"""
    rsvps = RsvpService.list_rsvps_for_event(event_id, db)
    return success_response(
        message="RSVPs retrieved",
        data=[RsvpUser.model_validate(rsvp) for rsvp in rsvps]
    )

@router.get("/{event_id}/rsvps/export.xlsx")
async def export_event_rsvps(
    event_id: str,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """Download the event roster as an Excel file"""
    event = EventService.get_event(event_id, db)
    rsvps = RsvpService.list_rsvps_for_event(event_id, db)
    content = ExcelService.export_roster(event, rsvps)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=roster_{event.id}.xlsx"}
    )

@router.post("/{event_id}/scanin", status_code=201, dependencies=[Depends(check_in_rate_limit)])
async def scanin(
    event_id: str,
    scanin_data: ScaninRequest,
    db: Session = Depends(get_db),
    mentor: User = Depends(require_mentor)
):
    """RSVP to an event by using a scancode"""
    rsvp = CheckInService.scan_in(event_id, scanin_data.code, db)
    return success_response(
        message="Scanned in",
        data=RsvpResponse.model_validate(rsvp),
        status_code=201
    )
