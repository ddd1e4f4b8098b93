"""
User management and outreach reporting
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from attendance.core.errors import BadRequestError, NotFoundError
from attendance.models import EventType, User
from attendance.schemas.event import EventResponse
from attendance.schemas.user import OutreachReport, UserUpdate
from attendance.services.repositories import RsvpRepo, UserRepo
from attendance.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {"first_name", "last_name"}

class UserService:
    """Service for user operations"""

    @staticmethod
    def get_user(user_id: str, db: Session) -> User:
        user = UserRepo.get(db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return UserRepo.list(db)

    @staticmethod
    def update_user(user_id: str, user_update: UserUpdate, db: Session) -> User:
        user = UserService.get_user(user_id, db)

        fields = user_update.model_dump(exclude_unset=True)

        email = fields.get("email")
        if email:
            owner = UserRepo.get_by_email(db, email)
            if owner and owner.id != user.id:
                raise BadRequestError("The email must be unique")

        for field, value in fields.items():
            # Names are required; an explicit null leaves them unchanged
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(user, field, value)
        user.updated_at = utcnow()

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise

        db.refresh(user)
        return user

    @staticmethod
    def regenerate_calendar_secret(user_id: str, db: Session) -> User:
        user = UserService.get_user(user_id, db)
        user.calendar_secret = str(uuid.uuid4())
        db.commit()
        db.refresh(user)
        logger.info(f"User with id: {user_id} calendar secret was regenerated.")
        return user

    @staticmethod
    def delete_user(user_id: str, db: Session) -> User:
        """Delete a user together with their scancodes and RSVPs"""
        user = UserService.get_user(user_id, db)
        try:
            UserRepo.delete(db, user)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"User {user_id} deleted")
        return user

    @staticmethod
    def login(profile: Dict[str, Any], roles: List[str], db: Session) -> User:
        """Create the user on first login, refresh profile and roles afterwards.

        ``profile`` is the identity provider's user object (id, username,
        global_name, email).
        """
        user = UserRepo.get(db, profile["id"])
        first_name, _, last_name = (profile.get("global_name") or profile["username"]).partition(" ")

        if user is None:
            user = UserRepo.create(
                db,
                id=profile["id"],
                username=profile["username"],
                first_name=first_name,
                last_name=last_name,
                email=profile.get("email"),
                roles=roles,
            )
            logger.info(f"User {user.id} created on first login")
        else:
            user.username = profile["username"]
            user.roles = roles
            user.updated_at = utcnow()

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def outreach_report(user_id: str, from_date: datetime, to_date: datetime, db: Session) -> OutreachReport:
        """Outreach events in the range that the user attended, and their total hours"""
        UserService.get_user(user_id, db)
        if to_date < from_date:
            raise BadRequestError("from must not be after to")

        events = RsvpRepo.attended_between(db, user_id, from_date, to_date, EventType.OUTREACH)
        hours = sum((event.end_date - event.start_date).total_seconds() for event in events) / 3600

        return OutreachReport(
            user_id=user_id,
            from_date=from_date,
            to_date=to_date,
            event_count=len(events),
            hours=round(hours, 2),
            events=[EventResponse.model_validate(event) for event in events],
        )
