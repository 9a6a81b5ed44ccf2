"""
Calendar API routes.
"""

from fastapi import APIRouter, Query
from typing import Optional
from datetime import date

from services.calendar_service import get_calendar_service
from routes.common import handle_error, success

router = APIRouter()


@router.get("")
async def list_calendar_events(
    start_date: Optional[date] = Query(None, description="First day shown"),
    end_date: Optional[date] = Query(None, description="Last day shown")
):
    """
    Calendar events between start_date and end_date.

    Initiative starts and ends plus achievements, sorted by date.
    """
    try:
        events = get_calendar_service().get_events(start_date, end_date)
        return success(events, meta={"total": len(events)})
    except Exception as e:
        return handle_error(e)
