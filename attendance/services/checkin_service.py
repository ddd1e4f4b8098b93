"""
Event check-in by scancode or by time-boxed event token
"""

import enum
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from attendance.core.config import settings
from attendance.core.errors import BadRequestError, DomainError, NotFoundError
from attendance.models import Rsvp, RSVPStatus
from attendance.services.repositories import EventRepo, RsvpRepo, ScancodeRepo
from attendance.services.rsvp_service import RsvpService
from attendance.services.token_service import EventTokenService
from attendance.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

INVALID_SCANCODE = "Invalid Scancode"
INVALID_TOKEN = "Invalid or expired code"


class CheckInState(str, enum.Enum):
    RECEIVED = "received"
    RESOLVED = "resolved"
    VERIFIED = "verified"
    COMMITTED = "committed"
    REJECTED = "rejected"


def checkin_status() -> RSVPStatus:
    return RSVPStatus(settings.CHECKIN_STATUS)


class CheckInAttempt:
    """Tracks one check-in through RECEIVED -> RESOLVED -> VERIFIED -> COMMITTED"""

    def __init__(self, path: str, event_id: str):
        self.path = path
        self.event_id = event_id
        self.user_id: Optional[str] = None
        self.state = CheckInState.RECEIVED

    def advance(self, state: CheckInState) -> None:
        self.state = state

    def reject(self, error: DomainError) -> DomainError:
        self.state = CheckInState.REJECTED
        # The reason stays out of the log line as well as the response
        logger.info(f"Rejected {self.path} check-in for event {self.event_id}")
        return error

    def commit(self, rsvp: Rsvp) -> Rsvp:
        self.state = CheckInState.COMMITTED
        logger.info(f"Checked in user {rsvp.user_id} to event {self.event_id} via {self.path}")
        return rsvp


class CheckInService:
    """Service for handling event check-ins"""

    @staticmethod
    def scan_in(event_id: str, code: str, db: Session) -> Rsvp:
        """Check in the owner of ``code``; a known scancode is sufficient proof"""
        attempt = CheckInAttempt("scan", event_id)

        if not EventRepo.get(db, event_id):
            raise attempt.reject(NotFoundError("Event not found"))

        scancode = ScancodeRepo.get(db, code)
        if not scancode:
            raise attempt.reject(BadRequestError(INVALID_SCANCODE))
        attempt.user_id = scancode.user_id
        attempt.advance(CheckInState.RESOLVED)

        attempt.advance(CheckInState.VERIFIED)
        rsvp = RsvpService.upsert_rsvp(event_id, scancode.user_id, checkin_status(), db)
        return attempt.commit(rsvp)

    @staticmethod
    def verify_event_token(
        event_id: str,
        user_id: str,
        code: str,
        db: Session,
        now: Optional[datetime] = None,
    ) -> Rsvp:
        """Check ``user_id`` in with an event token.

        A repeat check-in returns the existing RSVP untouched.
        """
        attempt = CheckInAttempt("token", event_id)
        attempt.user_id = user_id

        event = EventRepo.get(db, event_id)
        if not event:
            raise attempt.reject(NotFoundError("Event not found"))
        attempt.advance(CheckInState.RESOLVED)

        if not EventTokenService.verify_token(event, code, now or utcnow()):
            raise attempt.reject(BadRequestError(INVALID_TOKEN))
        attempt.advance(CheckInState.VERIFIED)

        status = checkin_status()
        existing = RsvpRepo.get(db, event_id, user_id)
        if existing and existing.status == status:
            return attempt.commit(existing)

        rsvp = RsvpService.upsert_rsvp(event_id, user_id, status, db)
        return attempt.commit(rsvp)
