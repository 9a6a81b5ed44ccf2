"""
Field configuration schemas.

Describe how each initiative form field is rendered: label, help text,
visibility, required flag and position.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, PatchSchema, TimestampMixin, ReorderEntry


class FieldType(str, Enum):
    """Form widget types."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    MULTISELECT = "multiselect"
    DATE = "date"
    NUMBER = "number"
    BOOLEAN = "boolean"


class FieldConfigurationUpdate(PatchSchema):
    """Update a field configuration; only provided fields change."""

    non_nullable = frozenset({"label", "is_required", "is_visible", "field_type"})

    label: Optional[str] = Field(None, min_length=1, max_length=100)
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    is_required: Optional[bool] = None
    is_visible: Optional[bool] = None
    field_type: Optional[FieldType] = None
    options: Optional[list[str]] = None


class FieldConfigurationResponse(BaseSchema, TimestampMixin):
    """Field configuration with all fields."""

    id: str
    section: str
    field_name: str
    field_type: FieldType = FieldType.TEXT
    label: str
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    is_required: bool = False
    is_visible: bool = True
    sort_order: int = 0
    options: Optional[list[str]] = None


class FieldConfigurationReorder(BaseSchema):
    """Reorder body for field configurations."""

    section: Optional[str] = Field(None, description="Restrict the reorder to one form section")
    items: list[ReorderEntry]
