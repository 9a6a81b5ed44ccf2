"""
Navigation service: sidebar entries, their visibility and order.
"""

from typing import Optional
import structlog

from models.navigation import (
    NavigationItemCreate,
    NavigationItemUpdate,
    NavigationItemResponse,
)
from exceptions import NavigationItemNotFoundError
from services.base_repository import BaseRepository
from utils.ordering import check_permutation, next_sort_order

logger = structlog.get_logger(__name__)


class NavigationService(BaseRepository[NavigationItemResponse]):
    """Navigation item management."""

    table = "navigation_settings"
    response_model = NavigationItemResponse
    not_found_error = NavigationItemNotFoundError
    order_by = "sort_order"
    order_desc = False

    def get_all(self, visible_only: bool = False) -> list[NavigationItemResponse]:
        """Navigation items in display order."""
        return self.fetch_all({"is_visible": True} if visible_only else None)

    def create(self, data: NavigationItemCreate) -> NavigationItemResponse:
        """Create a navigation item, appended at the end unless sort_order is given."""
        row = data.model_dump(mode="json")
        if row.get("sort_order") is None:
            row["sort_order"] = next_sort_order([item.sort_order for item in self.get_all()])

        logger.info("creating_navigation_item", item_key=row["item_key"], sort_order=row["sort_order"])
        return self.insert_row(row)

    def update(self, item_id: str, data: NavigationItemUpdate) -> NavigationItemResponse:
        patch = data.model_dump(exclude_unset=True, mode="json")
        logger.info("updating_navigation_item", item_id=item_id, fields=list(patch.keys()))
        return self.update_row(item_id, patch)

    def delete(self, item_id: str) -> None:
        self.delete_row(item_id)
        logger.info("navigation_item_deleted", item_id=item_id)

    def reorder(self, ordered_ids: list[str]) -> None:
        """
        Set the sidebar order.

        Raises:
            InvalidReorderError: Unless ordered_ids lists every item exactly once
        """
        items = self.get_all()
        check_permutation([item.id for item in items], ordered_ids, scope="navigation")

        written = self.set_sort_orders(
            list(ordered_ids),
            {item.id: item.sort_order for item in items}
        )
        logger.info("navigation_reordered", count=len(ordered_ids), written=written)


# Singleton instance for convenience
_navigation_service: Optional[NavigationService] = None


def get_navigation_service() -> NavigationService:
    """Get or create NavigationService instance."""
    global _navigation_service
    if _navigation_service is None:
        _navigation_service = NavigationService()
    return _navigation_service
