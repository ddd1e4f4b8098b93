"""
Time-boxed event check-in tokens.

Each event carries its own base32 secret; a token is the TOTP of that secret,
so a code issued for one event never verifies against another.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

import pyotp

from attendance.core.config import settings
from attendance.models import Event
from attendance.utils.timeutils import to_naive_utc, utcnow


class EventTokenService:
    """Issues and verifies per-event TOTP check-in codes"""

    @staticmethod
    def generate_secret() -> str:
        return pyotp.random_base32()

    @staticmethod
    def _totp(secret: str) -> pyotp.TOTP:
        return pyotp.TOTP(secret, interval=settings.EVENT_TOKEN_INTERVAL_SECONDS)

    @staticmethod
    def issue_token(secret: str, now: Optional[datetime] = None) -> str:
        """Current code for ``secret``"""
        now = to_naive_utc(now) or utcnow()
        return EventTokenService._totp(secret).at(now.replace(tzinfo=timezone.utc))

    @staticmethod
    def is_within_window(event: Event, now: datetime) -> bool:
        """Event times and ``now`` are naive UTC"""
        margin = timedelta(minutes=settings.EVENT_CHECKIN_MARGIN_MINUTES)
        return event.start_date - margin <= now <= event.end_date + margin

    @staticmethod
    def verify_token(event: Event, code: Optional[str], now: Optional[datetime] = None) -> bool:
        """True only if ``code`` matches the event's secret and ``now`` is inside
        the event's check-in window. Malformed input is a plain mismatch."""
        if not code or not event.secret:
            return False
        now = to_naive_utc(now) or utcnow()
        if not EventTokenService.is_within_window(event, now):
            return False
        try:
            return EventTokenService._totp(event.secret).verify(
                code.strip(),
                for_time=now.replace(tzinfo=timezone.utc),
                valid_window=settings.EVENT_TOKEN_VALID_WINDOW,
            )
        except (TypeError, ValueError):
            return False

    @staticmethod
    def callback_url(event_id: str, code: str) -> str:
        """URL a member opens (or scans) to check in with ``code``"""
        query = urlencode({"code": code})
        return f"{settings.BASE_URL}/event/{event_id}/token/callback?{query}"
