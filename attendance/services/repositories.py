"""
Repository layer: one explicit query surface per entity.

Repositories flush but never commit; the calling service owns the transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from attendance.core.errors import ConflictError
from attendance.models import Event, Rsvp, RSVPStatus, Scancode, User
from attendance.utils.timeutils import utcnow


# -------- User repository --------

class UserRepo:
    @staticmethod
    def get(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def list(db: Session, skip: int = 0, take: Optional[int] = None) -> List[User]:
        query = db.query(User).order_by(User.last_name, User.first_name).offset(skip)
        if take is not None:
            query = query.limit(take)
        return query.all()

    @staticmethod
    def create(db: Session, **fields) -> User:
        user = User(**fields)
        db.add(user)
        db.flush()
        return user

    @staticmethod
    def delete(db: Session, user: User) -> None:
        db.delete(user)
        db.flush()


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def existing_ids(db: Session, event_ids: Iterable[str]) -> set:
        ids = list(event_ids)
        if not ids:
            return set()
        rows = db.query(Event.id).filter(Event.id.in_(ids)).all()
        return {row.id for row in rows}

    @staticmethod
    def in_range(
        db: Session,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        take: Optional[int] = None,
        event_type=None,
    ) -> List[Event]:
        """Events overlapping [from_date, to_date].

        An event matches when its start or end is on or before ``to_date`` and
        its start or end is on or after ``from_date``.
        """
        query = db.query(Event)
        conditions = []
        if to_date is not None:
            conditions.append(or_(Event.start_date <= to_date, Event.end_date <= to_date))
        if from_date is not None:
            conditions.append(or_(Event.start_date >= from_date, Event.end_date >= from_date))
        if event_type is not None:
            conditions.append(Event.type == event_type)
        if conditions:
            query = query.filter(and_(*conditions))
        query = query.order_by(Event.start_date)
        if take is not None:
            query = query.limit(take)
        return query.all()

    @staticmethod
    def create(db: Session, **fields) -> Event:
        event = Event(**fields)
        db.add(event)
        db.flush()
        return event

    @staticmethod
    def delete(db: Session, event: Event) -> None:
        db.delete(event)
        db.flush()


# -------- Scancode repository --------

class ScancodeRepo:
    @staticmethod
    def get(db: Session, code: str) -> Optional[Scancode]:
        return db.query(Scancode).filter(Scancode.code == code).first()

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> List[Scancode]:
        return db.query(Scancode).filter(Scancode.user_id == user_id).order_by(Scancode.created_at).all()

    @staticmethod
    def create(db: Session, user_id: str, code: str) -> Scancode:
        """Insert a scancode; the primary key on ``code`` enforces global uniqueness"""
        scancode = Scancode(code=code, user_id=user_id)
        try:
            with db.begin_nested():
                db.add(scancode)
        except IntegrityError:
            raise ConflictError("Scancode already exists")
        return scancode

    @staticmethod
    def delete(db: Session, scancode: Scancode) -> None:
        db.delete(scancode)
        db.flush()


# -------- RSVP repository --------

class RsvpRepo:
    @staticmethod
    def get(db: Session, event_id: str, user_id: str) -> Optional[Rsvp]:
        return db.query(Rsvp).filter(Rsvp.event_id == event_id, Rsvp.user_id == user_id).first()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[Rsvp]:
        return (
            db.query(Rsvp)
            .options(joinedload(Rsvp.user))
            .filter(Rsvp.event_id == event_id)
            .order_by(Rsvp.created_at)
            .all()
        )

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> List[Rsvp]:
        return db.query(Rsvp).filter(Rsvp.user_id == user_id).order_by(Rsvp.created_at).all()

    @staticmethod
    def upsert(db: Session, event_id: str, user_id: str, status: RSVPStatus) -> Rsvp:
        """Create or update the single row keyed by (event_id, user_id).

        The insert runs in a savepoint. If the primary key rejects it, another
        writer got there first and the row is updated instead.
        """
        rsvp = RsvpRepo.get(db, event_id, user_id)
        if rsvp is None:
            try:
                with db.begin_nested():
                    rsvp = Rsvp(event_id=event_id, user_id=user_id, status=status)
                    db.add(rsvp)
                return rsvp
            except IntegrityError:
                rsvp = RsvpRepo.get(db, event_id, user_id)
                if rsvp is None:
                    raise ConflictError("RSVP could not be written")

        rsvp.status = status
        rsvp.updated_at = utcnow()
        db.flush()
        return rsvp

    @staticmethod
    def attended_between(db: Session, user_id: str, from_date: datetime, to_date: datetime, event_type) -> List[Event]:
        events = EventRepo.in_range(db, from_date=from_date, to_date=to_date, event_type=event_type)
        if not events:
            return []
        attended = {
            row.event_id
            for row in db.query(Rsvp.event_id).filter(
                Rsvp.user_id == user_id,
                Rsvp.status == RSVPStatus.ATTENDED,
                Rsvp.event_id.in_([event.id for event in events]),
            )
        }
        return [event for event in events if event.id in attended]
