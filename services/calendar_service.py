"""
Calendar service.

Lays initiative start/end dates and achievements out as dated events.
Nothing is stored; events are rebuilt on every request.
"""

from datetime import date
from typing import Optional
import structlog

from models.achievement import AchievementResponse, AchievementType
from models.calendar import CalendarEvent, CalendarEventType
from models.initiative import InitiativeResponse
from services.achievement_service import AchievementService, get_achievement_service
from services.initiative_service import InitiativeService, check_date_range, get_initiative_service

logger = structlog.get_logger(__name__)

EVENT_COLORS = {
    CalendarEventType.START: "blue",
    CalendarEventType.END: "red",
    CalendarEventType.ACHIEVEMENT: "green",
    CalendarEventType.MILESTONE: "purple",
}


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start and day < start:
        return False
    if end and day > end:
        return False
    return True


def build_events(
    initiatives: list[InitiativeResponse],
    achievements: list[AchievementResponse],
    start: Optional[date] = None,
    end: Optional[date] = None
) -> list[CalendarEvent]:
    """
    Turn initiatives and achievements into calendar events.

    Each initiative contributes a start and an end event; each achievement
    one event typed by its kind. Events outside [start, end] are dropped.
    Sorted by date, then title.
    """
    events = []

    for initiative in initiatives:
        for event_type, day in (
            (CalendarEventType.START, initiative.start_date),
            (CalendarEventType.END, initiative.end_date),
        ):
            if not _in_range(day, start, end):
                continue
            events.append(CalendarEvent(
                id=f"{initiative.id}:{event_type.value}",
                title=initiative.title,
                date=day,
                type=event_type,
                initiative_id=initiative.id,
                description=initiative.description,
                color=EVENT_COLORS[event_type]
            ))

    for achievement in achievements:
        if not _in_range(achievement.date_achieved, start, end):
            continue
        event_type = (
            CalendarEventType.MILESTONE
            if achievement.type == AchievementType.MILESTONE
            else CalendarEventType.ACHIEVEMENT
        )
        events.append(CalendarEvent(
            id=achievement.id,
            title=achievement.title,
            date=achievement.date_achieved,
            type=event_type,
            initiative_id=achievement.initiative_id,
            description=achievement.description,
            color=EVENT_COLORS[event_type]
        ))

    events.sort(key=lambda e: (e.date, e.title))
    return events


class CalendarService:
    """Builds calendar events from initiatives and achievements."""

    def __init__(
        self,
        initiatives: Optional[InitiativeService] = None,
        achievements: Optional[AchievementService] = None
    ):
        self.initiatives = initiatives or get_initiative_service()
        self.achievements = achievements or get_achievement_service()

    def get_events(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> list[CalendarEvent]:
        """
        Events between start_date and end_date, inclusive.

        Raises:
            InvalidDateRangeError: If end_date is before start_date
        """
        check_date_range(start_date, end_date)

        initiatives = self.initiatives.get_all(start_date=start_date, end_date=end_date)
        achievements = self.achievements.get_all(start_date=start_date, end_date=end_date)
        events = build_events(initiatives, achievements, start_date, end_date)

        logger.debug(
            "calendar_events_built",
            initiatives=len(initiatives),
            achievements=len(achievements),
            events=len(events)
        )
        return events


# Singleton instance for convenience
_calendar_service: Optional[CalendarService] = None


def get_calendar_service() -> CalendarService:
    """Get or create CalendarService instance."""
    global _calendar_service
    if _calendar_service is None:
        _calendar_service = CalendarService()
    return _calendar_service
