"""
Field configuration service.

Rows are seeded with the schema; admins only relabel, hide, require and
reorder them, so there is no create or delete here.
"""

from typing import Optional
import structlog

from models.field_configuration import (
    FieldConfigurationUpdate,
    FieldConfigurationResponse,
)
from exceptions import FieldConfigurationNotFoundError
from services.base_repository import BaseRepository
from utils.ordering import check_permutation

logger = structlog.get_logger(__name__)


class FieldConfigurationService(BaseRepository[FieldConfigurationResponse]):
    """Form field configuration management."""

    table = "field_configurations"
    response_model = FieldConfigurationResponse
    not_found_error = FieldConfigurationNotFoundError
    order_by = "sort_order"
    order_desc = False

    def get_all(self, section: Optional[str] = None) -> list[FieldConfigurationResponse]:
        """Field configurations in form order, optionally for one section."""
        return self.fetch_all({"section": section})

    def update(self, config_id: str, data: FieldConfigurationUpdate) -> FieldConfigurationResponse:
        patch = data.model_dump(exclude_unset=True, mode="json")
        logger.info("updating_field_configuration", config_id=config_id, fields=list(patch.keys()))
        return self.update_row(config_id, patch)

    def reorder(self, ordered_ids: list[str], section: Optional[str] = None) -> None:
        """
        Set the form order of a section (or of every field when no section).

        Raises:
            InvalidReorderError: Unless ordered_ids lists every field exactly once
        """
        configs = self.get_all(section)
        check_permutation(
            [c.id for c in configs],
            ordered_ids,
            scope=section or "field_configurations"
        )

        written = self.set_sort_orders(
            list(ordered_ids),
            {c.id: c.sort_order for c in configs}
        )
        logger.info(
            "field_configurations_reordered",
            section=section,
            count=len(ordered_ids),
            written=written
        )


# Singleton instance for convenience
_field_configuration_service: Optional[FieldConfigurationService] = None


def get_field_configuration_service() -> FieldConfigurationService:
    """Get or create FieldConfigurationService instance."""
    global _field_configuration_service
    if _field_configuration_service is None:
        _field_configuration_service = FieldConfigurationService()
    return _field_configuration_service
