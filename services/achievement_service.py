"""
Achievement service for CRUD operations.

Achievements and milestones belong to an initiative; the store's foreign
key rejects unknown initiative ids.
"""

from datetime import date
from typing import Optional
import structlog

from models.achievement import (
    AchievementCreate,
    AchievementUpdate,
    AchievementResponse,
    AchievementType,
)
from exceptions import AchievementNotFoundError
from services.base_repository import BaseRepository
from services.initiative_service import check_date_range

logger = structlog.get_logger(__name__)


class AchievementService(BaseRepository[AchievementResponse]):
    """Achievement business logic."""

    table = "achievements"
    response_model = AchievementResponse
    not_found_error = AchievementNotFoundError
    order_by = "date_achieved"

    def get_all(
        self,
        initiative_id: Optional[str] = None,
        achievement_type: Optional[AchievementType] = None,
        created_by_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> list[AchievementResponse]:
        """
        Get achievements, most recent first.

        Args:
            initiative_id: Filter by initiative
            achievement_type: achievement or milestone
            created_by_id: Filter by creator
            start_date: date_achieved on or after
            end_date: date_achieved on or before

        Raises:
            InvalidDateRangeError: If end_date is before start_date
        """
        check_date_range(start_date, end_date)

        query = self._select()
        if initiative_id:
            query = query.eq("initiative_id", initiative_id)
        if achievement_type:
            query = query.eq("type", AchievementType(achievement_type).value)
        if created_by_id:
            query = query.eq("created_by_id", created_by_id)
        if start_date:
            query = query.gte("date_achieved", start_date.isoformat())
        if end_date:
            query = query.lte("date_achieved", end_date.isoformat())

        return self._run_list(query, initiative_id=initiative_id)

    def create(self, data: AchievementCreate) -> AchievementResponse:
        logger.info("creating_achievement", initiative_id=data.initiative_id, type=data.type.value)

        achievement = self.insert_row(data.model_dump(mode="json"))

        logger.info("achievement_created", achievement_id=achievement.id)
        return achievement

    def update(self, achievement_id: str, data: AchievementUpdate) -> AchievementResponse:
        """
        Update an achievement; only provided fields change.

        Raises:
            AchievementNotFoundError: If the achievement does not exist
        """
        patch = data.model_dump(exclude_unset=True, mode="json")
        logger.info("updating_achievement", achievement_id=achievement_id, fields=list(patch.keys()))
        return self.update_row(achievement_id, patch)

    def delete(self, achievement_id: str) -> None:
        self.delete_row(achievement_id)
        logger.info("achievement_deleted", achievement_id=achievement_id)


# Singleton instance for convenience
_achievement_service: Optional[AchievementService] = None


def get_achievement_service() -> AchievementService:
    """Get or create AchievementService instance."""
    global _achievement_service
    if _achievement_service is None:
        _achievement_service = AchievementService()
    return _achievement_service
