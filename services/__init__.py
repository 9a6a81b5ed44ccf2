"""
Business logic services.

Each service handles one domain area.
"""

from services.base_repository import BaseRepository
from services.taxonomy_service import TaxonomyService, get_taxonomy_service
from services.initiative_service import InitiativeService, get_initiative_service
from services.achievement_service import AchievementService, get_achievement_service
from services.user_service import UserService, get_user_service
from services.navigation_service import NavigationService, get_navigation_service
from services.field_configuration_service import (
    FieldConfigurationService,
    get_field_configuration_service,
)
from services.field_mapping_service import (
    FieldMappingService,
    get_field_mapping_service,
    TAXONOMY_FIELDS,
    resolve_fields,
    build_decision_request,
    apply_stored_mappings,
    apply_decisions,
)
from services.reconciliation_service import ReconciliationService, get_reconciliation_service
from services.calendar_service import CalendarService, get_calendar_service, build_events
from services.export_service import ExportService, get_export_service

__all__ = [
    "BaseRepository",
    "TaxonomyService",
    "get_taxonomy_service",
    "InitiativeService",
    "get_initiative_service",
    "AchievementService",
    "get_achievement_service",
    "UserService",
    "get_user_service",
    "NavigationService",
    "get_navigation_service",
    "FieldConfigurationService",
    "get_field_configuration_service",
    "FieldMappingService",
    "get_field_mapping_service",
    "TAXONOMY_FIELDS",
    "resolve_fields",
    "build_decision_request",
    "apply_stored_mappings",
    "apply_decisions",
    "ReconciliationService",
    "get_reconciliation_service",
    "CalendarService",
    "get_calendar_service",
    "build_events",
    "ExportService",
    "get_export_service",
]
