"""
Field mapping schemas.

Covers the transient reconciliation types (verifications, decisions,
results) and the persisted mappings that remember past decisions.
"""

from pydantic import Field, field_validator, model_validator
from typing import Any, Optional
from enum import Enum

from models.base import BaseSchema, PatchSchema, TimestampMixin
from models.initiative import InitiativeResponse
from models.taxonomy import ConfigCategory, ConfigItemResponse


class MappingTargetType(str, Enum):
    """What to do with an unmapped value."""
    USE_EXISTING = "use-existing"
    CREATE_NEW = "create-new"
    SKIP = "skip"
    KEEP_AS_IS = "keep-as-is"


# Names stored by earlier clients
LEGACY_TARGET_TYPES = {
    "existing": MappingTargetType.USE_EXISTING,
    "new": MappingTargetType.CREATE_NEW,
    "keep": MappingTargetType.KEEP_AS_IS,
}

VALUE_TARGET_TYPES = (MappingTargetType.USE_EXISTING, MappingTargetType.CREATE_NEW)


def _coerce_target_type(v: Any) -> Any:
    if isinstance(v, str):
        return LEGACY_TARGET_TYPES.get(v.strip().lower(), v)
    return v


class MappingDecision(BaseSchema):
    """
    A reviewer's answer for one unmapped field.

    target_value is required for use-existing and create-new.
    """

    field_name: str = Field(..., min_length=1)
    target_type: MappingTargetType
    target_value: Optional[str] = None

    @field_validator("target_type", mode="before")
    @classmethod
    def accept_legacy_names(cls, v: Any) -> Any:
        return _coerce_target_type(v)

    @model_validator(mode="after")
    def value_present(self) -> "MappingDecision":
        if self.target_type in VALUE_TARGET_TYPES and not self.target_value:
            raise ValueError(f"target_value is required for {self.target_type.value}")
        return self


# ===================
# RESOLUTION
# ===================

class FieldVerification(BaseSchema):
    """Judgement for one taxonomy-backed field of a submission."""

    field_name: str
    category: ConfigCategory
    raw_value: Any = None
    matched_item: Optional[ConfigItemResponse] = None
    is_mapped: bool


class FieldResolution(BaseSchema):
    """All verifications of a record plus the unmapped subset, in field order."""

    verifications: list[FieldVerification] = Field(default_factory=list)
    unmapped: list[FieldVerification] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unmapped


class UnmappedField(BaseSchema):
    """One row of the decision request shown to a reviewer."""

    field_name: str
    category: ConfigCategory
    raw_value: Any = None
    available_options: list[str] = Field(default_factory=list)
    suggested_value: Optional[str] = None


class MappingResult(BaseSchema):
    """Outcome of applying a batch of decisions."""

    record: dict[str, Any] = Field(default_factory=dict)
    created_items: list[ConfigItemResponse] = Field(default_factory=list)
    applied: list[str] = Field(default_factory=list, description="Field names whose decision was applied")


# ===================
# STORED MAPPINGS
# ===================

class FieldMappingCreate(BaseSchema):
    """Remember a decision for a field/source value pair."""

    field_name: str = Field(..., min_length=1, max_length=100)
    source_value: str = Field(..., min_length=1, max_length=200)
    target_value: Optional[str] = Field(None, max_length=200)
    target_type: MappingTargetType
    is_active: bool = True
    created_by_id: Optional[str] = None

    @field_validator("target_type", mode="before")
    @classmethod
    def accept_legacy_names(cls, v: Any) -> Any:
        return _coerce_target_type(v)

    @model_validator(mode="after")
    def value_present(self) -> "FieldMappingCreate":
        if self.target_type in VALUE_TARGET_TYPES and not self.target_value:
            raise ValueError(f"target_value is required for {self.target_type.value}")
        return self


class FieldMappingUpdate(PatchSchema):
    """Update a stored mapping."""

    non_nullable = frozenset({"target_type", "is_active"})

    target_value: Optional[str] = Field(None, max_length=200)
    target_type: Optional[MappingTargetType] = None
    is_active: Optional[bool] = None

    @field_validator("target_type", mode="before")
    @classmethod
    def accept_legacy_names(cls, v: Any) -> Any:
        return _coerce_target_type(v)


class FieldMappingResponse(BaseSchema, TimestampMixin):
    """Stored mapping with all fields."""

    id: str
    field_name: str
    source_value: str
    target_value: Optional[str] = None
    target_type: MappingTargetType
    is_active: bool = True
    created_by_id: Optional[str] = None

    @field_validator("target_type", mode="before")
    @classmethod
    def accept_legacy_names(cls, v: Any) -> Any:
        return _coerce_target_type(v)


# ===================
# RECONCILIATION REQUESTS
# ===================

class ReconcileRequest(BaseSchema):
    """Submission to check against the taxonomy."""

    record: dict[str, Any]
    apply_stored: bool = Field(True, description="Rewrite with remembered mappings first")


class ReconcileResponse(BaseSchema):
    record: dict[str, Any]
    verifications: list[FieldVerification]
    unmapped: list[UnmappedField]
    is_complete: bool


class ApplyDecisionsRequest(BaseSchema):
    """Reviewer decisions for a submission."""

    record: dict[str, Any]
    decisions: list[MappingDecision] = Field(default_factory=list)
    remember: bool = Field(False, description="Store decisions as field mappings")
    create_initiative: bool = Field(False, description="Create the initiative from the rewritten record")
    created_by_id: Optional[str] = None


class ApplyDecisionsResponse(BaseSchema):
    """Rewritten record plus everything the decisions changed."""

    record: dict[str, Any]
    applied: list[str] = Field(default_factory=list)
    created_items: list[ConfigItemResponse] = Field(default_factory=list)
    remembered: list[FieldMappingResponse] = Field(default_factory=list)
    initiative: Optional[InitiativeResponse] = None
