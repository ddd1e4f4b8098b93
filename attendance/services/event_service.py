"""
Event management service
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from attendance.core.errors import BadRequestError, NotFoundError
from attendance.models import Event
from attendance.schemas.event import EventCreate, EventSecret, EventUpdate
from attendance.services.qr_service import QRService
from attendance.services.repositories import EventRepo
from attendance.services.token_service import EventTokenService
from attendance.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

class EventService:
    """Service for event CRUD and check-in material"""

    @staticmethod
    def list_events(
        db: Session,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        take: Optional[int] = None,
    ) -> List[Event]:
        return EventRepo.in_range(db, from_date=from_date, to_date=to_date, take=take)

    @staticmethod
    def get_event(event_id: str, db: Session) -> Event:
        event = EventRepo.get(db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    @staticmethod
    def create_event(event_data: EventCreate, db: Session) -> Event:
        try:
            event = EventRepo.create(
                db,
                secret=EventTokenService.generate_secret(),
                **event_data.model_dump(),
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(event)
        logger.info(f"Event {event.id} created: {event.title}")
        return event

    @staticmethod
    def update_event(event_id: str, event_update: EventUpdate, db: Session) -> Event:
        event = EventService.get_event(event_id, db)

        for field, value in event_update.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(event, field, value)

        if event.end_date < event.start_date:
            db.rollback()
            raise BadRequestError("end_date must not be before start_date")

        event.updated_at = utcnow()
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(event_id: str, db: Session) -> Event:
        """Delete an event; its RSVPs go with it"""
        event = EventService.get_event(event_id, db)
        try:
            EventRepo.delete(db, event)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Event {event_id} deleted")
        return event

    @staticmethod
    def get_event_secret(event_id: str, db: Session, now: Optional[datetime] = None) -> EventSecret:
        event = EventService.get_event(event_id, db)
        code = EventTokenService.issue_token(event.secret, now)
        return EventSecret(
            id=event.id,
            secret=event.secret,
            code=code,
            callback_url=EventTokenService.callback_url(event.id, code),
        )

    @staticmethod
    def event_token_qr(event_id: str, db: Session) -> bytes:
        """PNG of the current check-in callback URL, for display at the venue"""
        secret = EventService.get_event_secret(event_id, db)
        return QRService.generate_qr(secret.callback_url)
