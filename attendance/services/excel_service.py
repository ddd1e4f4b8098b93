"""
Excel export of event rosters
"""

import io
import re
from typing import List

import pandas as pd

from attendance.models import Event, Rsvp

class ExcelService:
    """Service for handling Excel operations"""

    COLUMNS = ['First Name', 'Last Name', 'Username', 'Status', 'Updated']

    @staticmethod
    def export_roster(event: Event, rsvps: List[Rsvp]) -> bytes:
        """Export an event's RSVPs, one row per member"""
        data = [
            {
                'First Name': rsvp.user.first_name,
                'Last Name': rsvp.user.last_name,
                'Username': rsvp.user.username,
                'Status': rsvp.status.value,
                'Updated': rsvp.updated_at,
            }
            for rsvp in rsvps
        ]

        df = pd.DataFrame(data, columns=ExcelService.COLUMNS)
        df = df.sort_values(by=['Last Name', 'First Name'], kind='stable')

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=ExcelService.sheet_name(event))

        return buffer.getvalue()

    @staticmethod
    def sheet_name(event: Event) -> str:
        # Excel rejects []:*?/\ in sheet titles and caps them at 31 characters
        name = re.sub(r'[\[\]:*?/\\]', ' ', event.title or '').strip()[:31]
        return name or 'Roster'
