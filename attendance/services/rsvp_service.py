"""
RSVP ledger: one status record per (event, user)
"""

import logging
from datetime import datetime
from typing import Iterable, List

from sqlalchemy.orm import Session

from attendance.core.errors import NotFoundError, ValidationError
from attendance.models import Rsvp, RSVPStatus
from attendance.services.repositories import EventRepo, RsvpRepo, UserRepo

logger = logging.getLogger(__name__)

class RsvpService:
    """Service for reading and writing RSVPs"""

    @staticmethod
    def get_rsvp(event_id: str, user_id: str, db: Session) -> Rsvp:
        rsvp = RsvpRepo.get(db, event_id, user_id)
        if not rsvp:
            raise NotFoundError("RSVP not found")
        return rsvp

    @staticmethod
    def upsert_rsvp(event_id: str, user_id: str, status: RSVPStatus, db: Session) -> Rsvp:
        """Set the status of one RSVP, creating it on first use"""
        if not EventRepo.get(db, event_id):
            raise NotFoundError("Event not found")
        if not UserRepo.get(db, user_id):
            raise NotFoundError("User not found")

        try:
            rsvp = RsvpRepo.upsert(db, event_id, user_id, status)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(rsvp)
        return rsvp

    @staticmethod
    def upsert_range_rsvp(user_id: str, event_ids: Iterable[str], status: RSVPStatus, db: Session) -> List[Rsvp]:
        """Set the same status on every event in ``event_ids``.

        All ids are checked before anything is written and the batch commits
        as one transaction, so either every RSVP is written or none is.
        """
        ids = list(dict.fromkeys(event_ids))
        if not UserRepo.get(db, user_id):
            raise NotFoundError("User not found")

        invalid = sorted(set(ids) - EventRepo.existing_ids(db, ids))
        if invalid:
            raise ValidationError("Unknown event ids", details=invalid)

        rsvps = []
        try:
            for event_id in ids:
                rsvps.append(RsvpRepo.upsert(db, event_id, user_id, status))
            db.commit()
        except Exception:
            db.rollback()
            raise

        for rsvp in rsvps:
            db.refresh(rsvp)
        logger.info(f"Set {len(rsvps)} RSVPs for user {user_id} to {status.value}")
        return rsvps

    @staticmethod
    def upsert_rsvps_in_range(
        user_id: str,
        from_date: datetime,
        to_date: datetime,
        status: RSVPStatus,
        db: Session,
    ) -> List[Rsvp]:
        """Range update resolved through the event overlap query"""
        events = EventRepo.in_range(db, from_date=from_date, to_date=to_date)
        return RsvpService.upsert_range_rsvp(user_id, [event.id for event in events], status, db)

    @staticmethod
    def list_rsvps_for_event(event_id: str, db: Session) -> List[Rsvp]:
        if not EventRepo.get(db, event_id):
            raise NotFoundError("Event not found")
        return RsvpRepo.list_for_event(db, event_id)

    @staticmethod
    def list_rsvps_for_user(user_id: str, db: Session) -> List[Rsvp]:
        return RsvpRepo.list_for_user(db, user_id)
