"""
Custom exception classes for the application.

Every error carries a stable code and an HTTP status so routes can turn it
into the standard failure envelope.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "INITIATIVE_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """
    Database operation failed (500).

    The backend message is kept in ``cause`` for logging; the public
    message never includes it.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )
        self.cause = message


# ===================
# INITIATIVE ERRORS
# ===================

class InitiativeNotFoundError(NotFoundError):
    """Initiative not found."""

    def __init__(self, initiative_id: str):
        super().__init__(
            resource="Initiative",
            identifier=initiative_id,
            code="INITIATIVE_NOT_FOUND"
        )


class InvalidDateRangeError(ValidationError):
    """End date before start date."""

    def __init__(self, start_date: str, end_date: str):
        super().__init__(
            code="INVALID_DATE_RANGE",
            message="End date must be on or after start date",
            details={"start_date": start_date, "end_date": end_date}
        )


# ===================
# ACHIEVEMENT ERRORS
# ===================

class AchievementNotFoundError(NotFoundError):
    """Achievement not found."""

    def __init__(self, achievement_id: str):
        super().__init__(
            resource="Achievement",
            identifier=achievement_id,
            code="ACHIEVEMENT_NOT_FOUND"
        )


# ===================
# USER ERRORS
# ===================

class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: str):
        super().__init__(
            resource="User",
            identifier=user_id,
            code="USER_NOT_FOUND"
        )


class UserEmailExistsError(ConflictError):
    """User email already registered."""

    def __init__(self, email: str):
        super().__init__(
            code="USER_EMAIL_EXISTS",
            message="User with this email already exists",
            details={"email": email}
        )


# ===================
# TAXONOMY ERRORS
# ===================

class ConfigItemNotFoundError(NotFoundError):
    """Config item not found."""

    def __init__(self, item_id: str):
        super().__init__(
            resource="Config item",
            identifier=item_id,
            code="CONFIG_ITEM_NOT_FOUND"
        )


class EmptyLabelError(ValidationError):
    """Config item label is blank."""

    def __init__(self, category: str):
        super().__init__(
            code="CONFIG_ITEM_LABEL_REQUIRED",
            message="Label is required",
            details={"category": category}
        )


class ConfigItemLabelExistsError(ValidationError):
    """An active config item with the same label exists in the category."""

    def __init__(self, category: str, label: str):
        super().__init__(
            code="CONFIG_ITEM_LABEL_EXISTS",
            message=f"'{label}' already exists in {category}",
            details={"category": category, "label": label}
        )


class InvalidReorderError(ValidationError):
    """Reorder ids are not a permutation of the current items."""

    def __init__(
        self,
        scope: str,
        missing: list[str],
        unexpected: list[str],
        duplicates: list[str]
    ):
        super().__init__(
            code="INVALID_REORDER",
            message=f"Reorder must list every active item in {scope} exactly once",
            details={
                "scope": scope,
                "missing": missing,
                "unexpected": unexpected,
                "duplicates": duplicates,
            }
        )


# ===================
# NAVIGATION ERRORS
# ===================

class NavigationItemNotFoundError(NotFoundError):
    """Navigation item not found."""

    def __init__(self, item_id: str):
        super().__init__(
            resource="Navigation item",
            identifier=item_id,
            code="NAVIGATION_ITEM_NOT_FOUND"
        )


# ===================
# FIELD CONFIGURATION ERRORS
# ===================

class FieldConfigurationNotFoundError(NotFoundError):
    """Field configuration not found."""

    def __init__(self, config_id: str):
        super().__init__(
            resource="Field configuration",
            identifier=config_id,
            code="FIELD_CONFIGURATION_NOT_FOUND"
        )


# ===================
# FIELD MAPPING ERRORS
# ===================

class FieldMappingNotFoundError(NotFoundError):
    """Stored field mapping not found."""

    def __init__(self, mapping_id: str):
        super().__init__(
            resource="Field mapping",
            identifier=mapping_id,
            code="FIELD_MAPPING_NOT_FOUND"
        )


class FieldMappingExistsError(ConflictError):
    """A mapping for this field/source value pair already exists."""

    def __init__(self, field_name: str, source_value: str):
        super().__init__(
            code="FIELD_MAPPING_EXISTS",
            message="Field mapping for this value already exists",
            details={"field_name": field_name, "source_value": source_value}
        )


class UnknownTaxonomyFieldError(ValidationError):
    """Decision targets a field that has no taxonomy category."""

    def __init__(self, field_name: str):
        super().__init__(
            code="UNKNOWN_TAXONOMY_FIELD",
            message=f"Field '{field_name}' is not backed by a taxonomy category",
            details={"field_name": field_name}
        )


class MappingApplicationError(ValidationError):
    """
    A create-new decision failed part way through a batch.

    Decisions before the failing one stay applied; ``partial`` holds the
    result built so far.
    """

    def __init__(self, field_name: str, cause: AppError, partial: Any):
        super().__init__(
            code="MAPPING_PARTIALLY_APPLIED",
            message=f"Mapping for '{field_name}' failed: {cause.message}",
            details={
                "failed_field": field_name,
                "cause_code": cause.code,
                "applied_fields": list(partial.applied),
                "created_items": [item.id for item in partial.created_items],
                "record": partial.record,
            }
        )
        self.field_name = field_name
        self.cause = cause
        self.partial = partial
