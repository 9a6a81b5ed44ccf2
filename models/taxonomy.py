"""
Taxonomy (config item) schemas.

Config items are the user-editable values that classify initiatives:
teams, statuses, priorities and so on. Each category is an ordered list.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, TimestampMixin, ReorderEntry


class ConfigCategory(str, Enum):
    """Taxonomy categories."""
    TEAMS = "teams"
    STATUSES = "statuses"
    PRIORITIES = "priorities"
    BUSINESS_IMPACTS = "business_impacts"
    PRODUCT_AREAS = "product_areas"
    PROCESS_STAGES = "process_stages"
    GTM_TYPES = "gtm_types"


class ItemColor(str, Enum):
    """Badge palette for config items."""
    GRAY = "gray"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"


class ConfigItemCreate(BaseSchema):
    """
    Create a new config item.

    Required: category, label
    Optional: color (defaults to the configured default color)
    """

    category: ConfigCategory = Field(..., description="Taxonomy category")
    label: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display label (case preserved)",
        examples=["On Track", "Platform Team"]
    )
    color: Optional[ItemColor] = Field(None, description="Badge color")
    created_by_id: Optional[str] = Field(None, description="Creator user UUID")


class ConfigItemUpdate(BaseSchema):
    """
    Update an existing config item.

    Category is immutable and ordering goes through reorder.
    """

    label: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[ItemColor] = None
    is_active: Optional[bool] = None


class ConfigItemResponse(BaseSchema, TimestampMixin):
    """Config item with all fields."""

    id: str = Field(..., description="Config item UUID")
    category: ConfigCategory
    label: str
    color: Optional[ItemColor] = None
    sort_order: int = 0
    is_active: bool = True
    created_by_id: Optional[str] = None


class ConfigItemReorder(BaseSchema):
    """Reorder body: the full active list of one category."""

    category: ConfigCategory
    items: list[ReorderEntry] = Field(..., description="Every active item with its new position")


class TaxonomySnapshot(BaseSchema):
    """
    Active items of every category at one point in time.

    Passed explicitly to the field mapping resolver; refresh by fetching a
    new snapshot after mutations.
    """

    items: dict[ConfigCategory, list[ConfigItemResponse]] = Field(default_factory=dict)

    def for_category(self, category: ConfigCategory) -> list[ConfigItemResponse]:
        """Active items of one category in display order."""
        return [item for item in self.items.get(category, []) if item.is_active]

    def labels(self, category: ConfigCategory) -> list[str]:
        return [item.label for item in self.for_category(category)]

    @classmethod
    def from_items(cls, items: list[ConfigItemResponse]) -> "TaxonomySnapshot":
        """Group a flat item list by category, active only, by sort order."""
        grouped: dict[ConfigCategory, list[ConfigItemResponse]] = {c: [] for c in ConfigCategory}
        for item in items:
            if item.is_active:
                grouped[item.category].append(item)
        for category in grouped:
            grouped[category].sort(key=lambda i: i.sort_order)
        return cls(items=grouped)
