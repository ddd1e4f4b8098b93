"""
Tests for scan-in and token check-in
"""

from datetime import datetime, timezone

import pytest

from attendance.core.errors import BadRequestError, NotFoundError
from attendance.models import Rsvp, RSVPStatus
from attendance.schemas.event import EventCreate
from attendance.services.checkin_service import CheckInService, checkin_status
from attendance.services.event_service import EventService
from attendance.services.rsvp_service import RsvpService
from attendance.services.scancode_service import ScancodeService
from attendance.services.token_service import EventTokenService
from tests.conftest import DURING_EVENT

def test_scan_in_checks_in_code_owner(db_session, member, event):
    ScancodeService.create_scancode(member.id, "CARD-0001", db_session)

    rsvp = CheckInService.scan_in(event.id, "CARD-0001", db_session)

    assert rsvp.user_id == member.id
    assert rsvp.event_id == event.id
    assert rsvp.status == checkin_status()

def test_scan_in_unknown_code(db_session, member, event):
    with pytest.raises(BadRequestError) as excinfo:
        CheckInService.scan_in(event.id, "nope", db_session)

    assert excinfo.value.message == "Invalid Scancode"
    assert db_session.query(Rsvp).count() == 0

def test_scan_in_overwrites_previous_status(db_session, member, event):
    RsvpService.upsert_rsvp(event.id, member.id, RSVPStatus.NO, db_session)
    ScancodeService.create_scancode(member.id, "CARD-0002", db_session)

    rsvp = CheckInService.scan_in(event.id, "CARD-0002", db_session)

    assert rsvp.status == RSVPStatus.ATTENDED
    assert db_session.query(Rsvp).count() == 1

def test_scan_in_unknown_event(db_session, member):
    ScancodeService.create_scancode(member.id, "CARD-0003", db_session)
    with pytest.raises(NotFoundError):
        CheckInService.scan_in("missing", "CARD-0003", db_session)

def test_verify_event_token(db_session, member, event):
    code = EventTokenService.issue_token(event.secret, DURING_EVENT)

    rsvp = CheckInService.verify_event_token(event.id, member.id, code, db_session, now=DURING_EVENT)

    assert rsvp.user_id == member.id
    assert rsvp.status == RSVPStatus.ATTENDED

def test_verify_event_token_is_idempotent(db_session, member, event):
    code = EventTokenService.issue_token(event.secret, DURING_EVENT)

    first = CheckInService.verify_event_token(event.id, member.id, code, db_session, now=DURING_EVENT)
    first_updated = first.updated_at
    second = CheckInService.verify_event_token(event.id, member.id, code, db_session, now=DURING_EVENT)

    assert (second.event_id, second.user_id) == (first.event_id, first.user_id)
    assert second.status == RSVPStatus.ATTENDED
    assert second.updated_at == first_updated
    assert db_session.query(Rsvp).filter_by(event_id=event.id, user_id=member.id).count() == 1

def test_verify_event_token_wrong_event(db_session, member, event, other_event):
    code = EventTokenService.issue_token(event.secret, DURING_EVENT)

    with pytest.raises(BadRequestError):
        CheckInService.verify_event_token(other_event.id, member.id, code, db_session, now=DURING_EVENT)
    assert db_session.query(Rsvp).count() == 0

def test_verify_event_token_bad_code(db_session, member, event):
    with pytest.raises(BadRequestError) as excinfo:
        CheckInService.verify_event_token(event.id, member.id, "000000x", db_session, now=DURING_EVENT)
    assert excinfo.value.message == "Invalid or expired code"

def test_verify_event_token_unknown_event(db_session, member):
    with pytest.raises(NotFoundError):
        CheckInService.verify_event_token("missing", member.id, "123456", db_session, now=DURING_EVENT)

def test_token_check_in_for_event_entered_with_offset(db_session, member):
    """An event created in local time (+02:00) checks in at the real UTC time"""
    event = EventService.create_event(EventCreate(
        title="Build Night",
        start_date="2026-03-07T17:00:00+02:00",
        end_date="2026-03-07T20:00:00+02:00",
    ), db_session)
    assert event.start_date == datetime(2026, 3, 7, 15, 0)

    mid_event = datetime(2026, 3, 7, 15, 30)
    code = EventTokenService.issue_token(event.secret, mid_event)
    rsvp = CheckInService.verify_event_token(event.id, member.id, code, db_session, now=mid_event)

    assert rsvp.status == checkin_status()

def test_token_check_in_accepts_aware_now(db_session, member, event):
    aware = DURING_EVENT.replace(tzinfo=timezone.utc)
    code = EventTokenService.issue_token(event.secret, DURING_EVENT)

    rsvp = CheckInService.verify_event_token(event.id, member.id, code, db_session, now=aware)

    assert rsvp.status == checkin_status()
