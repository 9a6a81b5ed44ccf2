"""
Calendar event schemas.

Events are derived, never stored: initiative start/end dates and
achievements laid out on a date axis.
"""

from pydantic import Field
from typing import Optional
from enum import Enum
import datetime as dt

from models.base import BaseSchema


class CalendarEventType(str, Enum):
    START = "start"
    END = "end"
    ACHIEVEMENT = "achievement"
    MILESTONE = "milestone"


class CalendarEvent(BaseSchema):
    """One dated entry on the calendar grid."""

    id: str
    title: str
    date: dt.date
    type: CalendarEventType
    initiative_id: Optional[str] = None
    description: Optional[str] = None
    color: str = Field("gray", description="Badge color")
