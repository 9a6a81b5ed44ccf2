"""
Achievement API routes.
"""

from fastapi import APIRouter, Query
from typing import Optional
from datetime import date

from models.achievement import AchievementCreate, AchievementUpdate, AchievementType
from services.achievement_service import get_achievement_service
from exceptions import AchievementNotFoundError
from routes.common import handle_error, lookup_response, success

router = APIRouter()


@router.get("")
async def list_achievements(
    initiative_id: Optional[str] = Query(None, description="Filter by initiative"),
    type: Optional[AchievementType] = Query(None, description="achievement or milestone"),
    creator_id: Optional[str] = Query(None, description="Filter by creator"),
    start_date: Optional[date] = Query(None, description="Achieved on or after"),
    end_date: Optional[date] = Query(None, description="Achieved on or before")
):
    """List achievements, most recent first."""
    try:
        achievements = get_achievement_service().get_all(
            initiative_id=initiative_id,
            achievement_type=type,
            created_by_id=creator_id,
            start_date=start_date,
            end_date=end_date
        )
        return success(achievements, meta={"total": len(achievements)})
    except Exception as e:
        return handle_error(e)


@router.get("/{achievement_id}")
async def get_achievement(achievement_id: str):
    try:
        lookup = get_achievement_service().find(achievement_id)
        return lookup_response(lookup, AchievementNotFoundError)
    except Exception as e:
        return handle_error(e)


@router.post("", status_code=201)
async def create_achievement(data: AchievementCreate):
    try:
        return success(get_achievement_service().create(data), status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/{achievement_id}")
async def update_achievement(achievement_id: str, data: AchievementUpdate):
    try:
        return success(get_achievement_service().update(achievement_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/{achievement_id}")
async def delete_achievement(achievement_id: str):
    try:
        get_achievement_service().delete(achievement_id)
        return success({"id": achievement_id, "message": "Achievement deleted"})
    except Exception as e:
        return handle_error(e)
