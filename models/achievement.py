"""
Achievement and milestone schemas.
"""

from pydantic import Field
from typing import Optional
from enum import Enum
from datetime import date

from models.base import BaseSchema, PatchSchema, TimestampMixin


class AchievementType(str, Enum):
    """Achievement kinds."""
    ACHIEVEMENT = "achievement"
    MILESTONE = "milestone"


class AchievementCreate(BaseSchema):
    """
    Record an achievement or milestone.

    Required: initiative_id, title, type, date_achieved, created_by_id
    """

    initiative_id: str = Field(..., min_length=1, description="Initiative UUID")
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: AchievementType
    date_achieved: date
    created_by_id: str = Field(..., min_length=1, description="Creator user UUID")


class AchievementUpdate(PatchSchema):
    """
    Update an achievement.

    The owning initiative cannot change.
    """

    non_nullable = frozenset({"title", "type", "date_achieved", "created_by_id"})

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[AchievementType] = None
    date_achieved: Optional[date] = None
    created_by_id: Optional[str] = Field(None, min_length=1)


class AchievementResponse(BaseSchema, TimestampMixin):
    """Achievement with all fields."""

    id: str
    initiative_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: AchievementType
    date_achieved: date
    created_by_id: Optional[str] = None
