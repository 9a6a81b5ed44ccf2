"""
Base schemas and mixins for all models.
"""

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, model_validator
from datetime import datetime
from typing import ClassVar, Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True
    )


class PatchSchema(BaseSchema):
    """
    Base for partial-update bodies.

    Every field is optional, but the ones listed in ``non_nullable`` map to
    NOT NULL columns: they may be left out of the body, not sent as null.
    """
    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set & self.non_nullable
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self


class TimestampMixin(BaseModel):
    """Add timestamps to response models."""
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReorderEntry(BaseSchema):
    """One row of a reorder request: an id and its new position."""

    id: str = Field(..., min_length=1, description="Row UUID")
    order: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("order", "sort_order", "sortOrder"),
        description="New position (lower sorts first)"
    )


def ordered_ids(entries: list[ReorderEntry]) -> list[str]:
    """Ids sorted by requested position; ties keep request order."""
    return [entry.id for entry in sorted(entries, key=lambda e: e.order)]
