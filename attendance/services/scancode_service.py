"""
Scancode store: user-owned codes used for one-tap check-in
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from attendance.core.errors import ForbiddenError, NotFoundError
from attendance.models import Scancode
from attendance.services.repositories import ScancodeRepo, UserRepo

logger = logging.getLogger(__name__)

class ScancodeService:
    """Service for scancode operations"""

    @staticmethod
    def create_scancode(user_id: str, code: str, db: Session) -> Scancode:
        if not UserRepo.get(db, user_id):
            raise NotFoundError("User not found")

        try:
            scancode = ScancodeRepo.create(db, user_id, code.strip())
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(scancode)
        logger.info(f"Scancode created for user {user_id}")
        return scancode

    @staticmethod
    def get_scancode(code: str, db: Session) -> Scancode:
        scancode = ScancodeRepo.get(db, code)
        if not scancode:
            raise NotFoundError("Scancode not found")
        return scancode

    @staticmethod
    def list_scancodes_for_user(user_id: str, db: Session) -> List[Scancode]:
        return ScancodeRepo.list_for_user(db, user_id)

    @staticmethod
    def delete_scancode(
        code: str,
        requester_id: str,
        is_privileged: bool,
        db: Session,
        owner_id: Optional[str] = None,
    ) -> Scancode:
        """Delete ``code`` on behalf of ``requester_id``.

        Non-privileged requesters may only delete their own codes. ``owner_id``
        pins the expected owner (the user named in a mentor route).
        """
        scancode = ScancodeService.get_scancode(code, db)

        if owner_id is not None and scancode.user_id != owner_id:
            raise ForbiddenError()
        if not is_privileged and scancode.user_id != requester_id:
            raise ForbiddenError()

        owner = scancode.user_id
        try:
            ScancodeRepo.delete(db, scancode)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Scancode deleted for user {owner} by {requester_id}")
        return scancode
