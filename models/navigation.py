"""
Navigation item schemas.

Navigation items are the sidebar entries; admins can hide and reorder them.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema, PatchSchema, TimestampMixin, ReorderEntry


class NavigationItemCreate(BaseSchema):
    """Create a navigation item. Appended at the end when no sort_order is given."""

    item_key: str = Field(..., min_length=1, max_length=100, description="Stable key, e.g. 'initiatives'")
    item_label: str = Field(..., min_length=1, max_length=100, description="Display label")
    is_visible: bool = True
    sort_order: Optional[int] = Field(None, ge=0)


class NavigationItemUpdate(PatchSchema):
    """Update a navigation item."""

    non_nullable = frozenset({"item_key", "item_label", "is_visible"})

    item_key: Optional[str] = Field(None, min_length=1, max_length=100)
    item_label: Optional[str] = Field(None, min_length=1, max_length=100)
    is_visible: Optional[bool] = None


class NavigationItemResponse(BaseSchema, TimestampMixin):
    """Navigation item with all fields."""

    id: str
    item_key: str
    item_label: str
    is_visible: bool = True
    sort_order: int = 0


class NavigationReorder(BaseSchema):
    """Reorder body for navigation items."""

    items: list[ReorderEntry]
