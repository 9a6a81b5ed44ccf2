"""
Taxonomy service for config item operations.

Config items are grouped into categories (teams, statuses, ...). Each
category is an ordered list; items are soft-deleted so old initiatives keep
their labels.
"""

from typing import Optional, Union
import structlog

from config.settings import get_settings
from models.taxonomy import (
    ConfigCategory,
    ConfigItemUpdate,
    ConfigItemResponse,
    ItemColor,
    TaxonomySnapshot,
)
from exceptions import (
    ConflictError,
    ConfigItemNotFoundError,
    ConfigItemLabelExistsError,
    EmptyLabelError,
    ValidationError,
)
from services.base_repository import BaseRepository
from utils.ordering import check_permutation, next_sort_order
from utils.text_utils import clean_label, normalize_label

logger = structlog.get_logger(__name__)


def _category(value: Union[ConfigCategory, str]) -> ConfigCategory:
    try:
        return ConfigCategory(value)
    except ValueError:
        raise ValidationError(
            code="INVALID_CATEGORY",
            message=f"Unknown config category '{value}'",
            details={"category": str(value), "allowed": [c.value for c in ConfigCategory]}
        )


class TaxonomyService(BaseRepository[ConfigItemResponse]):
    """
    Config item management.

    Labels are unique per category among active items, compared
    case-insensitively.
    """

    table = "config_items"
    response_model = ConfigItemResponse
    not_found_error = ConfigItemNotFoundError
    order_by = "sort_order"
    order_desc = False

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        category: Optional[Union[ConfigCategory, str]] = None,
        include_inactive: bool = False
    ) -> list[ConfigItemResponse]:
        """
        Get config items, ordered by sort_order.

        Args:
            category: Restrict to one category
            include_inactive: Also return soft-deleted items

        Returns:
            List of ConfigItemResponse
        """
        query = self._select()
        if category is not None:
            query = query.eq("category", _category(category).value)
        if not include_inactive:
            query = query.eq("is_active", True)
        return self._run_list(query, category=str(category) if category else None)

    def list_active(self, category: Union[ConfigCategory, str]) -> list[ConfigItemResponse]:
        """Active items of one category in display order."""
        return self.get_all(category)

    def snapshot(self) -> TaxonomySnapshot:
        """Active items of every category, each in display order."""
        snapshot = TaxonomySnapshot.from_items(self.get_all())
        logger.debug(
            "taxonomy_snapshot_taken",
            counts={c.value: len(items) for c, items in snapshot.items.items()}
        )
        return snapshot

    def _find_active_label(
        self,
        category: ConfigCategory,
        label: str,
        exclude_id: Optional[str] = None
    ) -> Optional[ConfigItemResponse]:
        key = normalize_label(label)
        for item in self.list_active(category):
            if item.id != exclude_id and normalize_label(item.label) == key:
                return item
        return None

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(
        self,
        category: Union[ConfigCategory, str],
        label: str,
        color: Optional[Union[ItemColor, str]] = None,
        created_by_id: Optional[str] = None
    ) -> ConfigItemResponse:
        """
        Create a config item at the end of its category.

        Args:
            category: Target category
            label: Display label, stored trimmed with case preserved
            color: Badge color (configured default when omitted)
            created_by_id: Creator user UUID

        Returns:
            Created ConfigItemResponse

        Raises:
            EmptyLabelError: If the label is blank
            ConfigItemLabelExistsError: If an active item has the same label
        """
        category = _category(category)
        cleaned = clean_label(label)
        if cleaned is None:
            raise EmptyLabelError(category.value)

        logger.info("creating_config_item", category=category.value, label=cleaned)

        existing = self.get_all(category, include_inactive=True)
        key = normalize_label(cleaned)
        for item in existing:
            if item.is_active and normalize_label(item.label) == key:
                raise ConfigItemLabelExistsError(category.value, cleaned)

        data = {
            "category": category.value,
            "label": cleaned,
            "color": ItemColor(color or get_settings().default_item_color).value,
            "sort_order": next_sort_order([item.sort_order for item in existing]),
            "is_active": True,
            "created_by_id": created_by_id,
        }

        try:
            item = self.insert_row(data)
        except ConflictError:
            # Another request created the same label first
            logger.warning("config_item_create_race", category=category.value, label=cleaned)
            raise ConfigItemLabelExistsError(category.value, cleaned)

        logger.info(
            "config_item_created",
            item_id=item.id,
            category=category.value,
            sort_order=item.sort_order
        )
        return item

    def update(self, item_id: str, data: ConfigItemUpdate) -> ConfigItemResponse:
        """
        Update label, color or active flag.

        Raises:
            ConfigItemNotFoundError: If the item does not exist
            ConfigItemLabelExistsError: If the new label clashes with an active item
        """
        existing = self.get_by_id(item_id)

        patch = data.model_dump(exclude_unset=True, mode="json")
        for key in ("label", "is_active"):
            if key in patch and patch[key] is None:
                del patch[key]

        if "label" in patch:
            patch["label"] = clean_label(patch["label"])
            if patch["label"] is None:
                raise EmptyLabelError(existing.category.value)

        label = patch.get("label", existing.label)
        active = patch.get("is_active", existing.is_active)
        renamed = normalize_label(label) != normalize_label(existing.label)
        reactivated = active and not existing.is_active

        if active and (renamed or reactivated):
            if self._find_active_label(existing.category, label, exclude_id=item_id):
                raise ConfigItemLabelExistsError(existing.category.value, label)

        logger.info("updating_config_item", item_id=item_id, fields=list(patch.keys()))

        try:
            return self.update_row(item_id, patch, existing=existing)
        except ConflictError:
            raise ConfigItemLabelExistsError(existing.category.value, label)

    def reorder(self, category: Union[ConfigCategory, str], ordered_ids: list[str]) -> None:
        """
        Set the display order of a category.

        ordered_ids must list every active item exactly once; item i gets
        sort_order i. Inactive items keep their relative order after the
        active ones.

        Raises:
            InvalidReorderError: If ordered_ids is not a permutation of the active ids
        """
        category = _category(category)
        items = self.get_all(category, include_inactive=True)
        active_ids = [item.id for item in items if item.is_active]

        check_permutation(active_ids, ordered_ids, scope=category.value)

        inactive_ids = [item.id for item in items if not item.is_active]
        current = {item.id: item.sort_order for item in items}

        written = self.set_sort_orders(list(ordered_ids) + inactive_ids, current)

        logger.info(
            "config_items_reordered",
            category=category.value,
            count=len(ordered_ids),
            written=written
        )

    def deactivate(self, item_id: str) -> None:
        """
        Soft delete a config item.

        Deactivating an inactive item is a no-op.

        Raises:
            ConfigItemNotFoundError: If the item does not exist
        """
        existing = self.get_by_id(item_id)
        if not existing.is_active:
            logger.debug("config_item_already_inactive", item_id=item_id)
            return

        self.update_row(item_id, {"is_active": False}, existing=existing)
        logger.info("config_item_deactivated", item_id=item_id, category=existing.category.value)


# Singleton instance for convenience
_taxonomy_service: Optional[TaxonomyService] = None


def get_taxonomy_service() -> TaxonomyService:
    """Get or create TaxonomyService instance."""
    global _taxonomy_service
    if _taxonomy_service is None:
        _taxonomy_service = TaxonomyService()
    return _taxonomy_service
