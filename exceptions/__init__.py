"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,
    DatabaseError,

    # Initiatives
    InitiativeNotFoundError,
    InvalidDateRangeError,

    # Achievements
    AchievementNotFoundError,

    # Users
    UserNotFoundError,
    UserEmailExistsError,

    # Taxonomy
    ConfigItemNotFoundError,
    EmptyLabelError,
    ConfigItemLabelExistsError,
    InvalidReorderError,

    # Navigation
    NavigationItemNotFoundError,

    # Field configurations
    FieldConfigurationNotFoundError,

    # Field mappings
    FieldMappingNotFoundError,
    FieldMappingExistsError,
    UnknownTaxonomyFieldError,
    MappingApplicationError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
    "DatabaseError",

    # Initiatives
    "InitiativeNotFoundError",
    "InvalidDateRangeError",

    # Achievements
    "AchievementNotFoundError",

    # Users
    "UserNotFoundError",
    "UserEmailExistsError",

    # Taxonomy
    "ConfigItemNotFoundError",
    "EmptyLabelError",
    "ConfigItemLabelExistsError",
    "InvalidReorderError",

    # Navigation
    "NavigationItemNotFoundError",

    # Field configurations
    "FieldConfigurationNotFoundError",

    # Field mappings
    "FieldMappingNotFoundError",
    "FieldMappingExistsError",
    "UnknownTaxonomyFieldError",
    "MappingApplicationError",
]
