"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    PatchSchema,
    TimestampMixin,
    ReorderEntry,
    ordered_ids,
)
from models.result import Found, NotFound, Failed, Lookup
from models.taxonomy import (
    ConfigCategory,
    ItemColor,
    ConfigItemCreate,
    ConfigItemUpdate,
    ConfigItemResponse,
    ConfigItemReorder,
    TaxonomySnapshot,
)
from models.initiative import (
    InitiativeCreate,
    InitiativeUpdate,
    InitiativeResponse,
    InitiativeStats,
    ExecutiveSummary,
    ExecutiveUpdateRequest,
)
from models.achievement import (
    AchievementType,
    AchievementCreate,
    AchievementUpdate,
    AchievementResponse,
)
from models.user import (
    UserRole,
    UserCreate,
    UserUpdate,
    UserResponse,
)
from models.navigation import (
    NavigationItemCreate,
    NavigationItemUpdate,
    NavigationItemResponse,
    NavigationReorder,
)
from models.field_configuration import (
    FieldType,
    FieldConfigurationUpdate,
    FieldConfigurationResponse,
    FieldConfigurationReorder,
)
from models.field_mapping import (
    MappingTargetType,
    MappingDecision,
    FieldVerification,
    FieldResolution,
    UnmappedField,
    MappingResult,
    FieldMappingCreate,
    FieldMappingUpdate,
    FieldMappingResponse,
    ReconcileRequest,
    ReconcileResponse,
    ApplyDecisionsRequest,
    ApplyDecisionsResponse,
)
from models.calendar import CalendarEventType, CalendarEvent

__all__ = [
    # Base
    "BaseSchema",
    "PatchSchema",
    "TimestampMixin",
    "ReorderEntry",
    "ordered_ids",
    "Found",
    "NotFound",
    "Failed",
    "Lookup",
    # Taxonomy
    "ConfigCategory",
    "ItemColor",
    "ConfigItemCreate",
    "ConfigItemUpdate",
    "ConfigItemResponse",
    "ConfigItemReorder",
    "TaxonomySnapshot",
    # Initiative
    "InitiativeCreate",
    "InitiativeUpdate",
    "InitiativeResponse",
    "InitiativeStats",
    "ExecutiveSummary",
    "ExecutiveUpdateRequest",
    # Achievement
    "AchievementType",
    "AchievementCreate",
    "AchievementUpdate",
    "AchievementResponse",
    # User
    "UserRole",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    # Navigation
    "NavigationItemCreate",
    "NavigationItemUpdate",
    "NavigationItemResponse",
    "NavigationReorder",
    # Field configuration
    "FieldType",
    "FieldConfigurationUpdate",
    "FieldConfigurationResponse",
    "FieldConfigurationReorder",
    # Field mapping
    "MappingTargetType",
    "MappingDecision",
    "FieldVerification",
    "FieldResolution",
    "UnmappedField",
    "MappingResult",
    "FieldMappingCreate",
    "FieldMappingUpdate",
    "FieldMappingResponse",
    "ReconcileRequest",
    "ReconcileResponse",
    "ApplyDecisionsRequest",
    "ApplyDecisionsResponse",
    # Calendar
    "CalendarEventType",
    "CalendarEvent",
]
