"""
Field mapping: resolve submitted values against the taxonomy and apply
reviewer decisions.

The resolver functions are pure: they take a record and a TaxonomySnapshot
and never touch the database. apply_decisions() is the only place that
creates config items (for create-new decisions). FieldMappingService stores
decisions so the same free-text value is rewritten automatically next time.
"""

from typing import Any, Optional
import structlog

from models.field_mapping import (
    FieldMappingCreate,
    FieldMappingUpdate,
    FieldMappingResponse,
    FieldResolution,
    FieldVerification,
    MappingDecision,
    MappingResult,
    MappingTargetType,
    UnmappedField,
    VALUE_TARGET_TYPES,
)
from models.taxonomy import ConfigCategory, ConfigItemResponse, TaxonomySnapshot
from exceptions import (
    ConflictError,
    FieldMappingExistsError,
    FieldMappingNotFoundError,
    MappingApplicationError,
    UnknownTaxonomyFieldError,
    ValidationError,
)
from services.base_repository import BaseRepository, translate_store_error
from utils.text_utils import is_blank, normalize_label, to_snake_case

logger = structlog.get_logger(__name__)


# Taxonomy-backed initiative fields, in resolution order
TAXONOMY_FIELDS: tuple[tuple[str, ConfigCategory], ...] = (
    ("product_area", ConfigCategory.PRODUCT_AREAS),
    ("team", ConfigCategory.TEAMS),
    ("status", ConfigCategory.STATUSES),
    ("priority", ConfigCategory.PRIORITIES),
    ("business_impact", ConfigCategory.BUSINESS_IMPACTS),
    ("process_stage", ConfigCategory.PROCESS_STAGES),
    ("gtm_type", ConfigCategory.GTM_TYPES),
)

FIELD_CATEGORIES: dict[str, ConfigCategory] = dict(TAXONOMY_FIELDS)

# Older forms sent the GTM type under this name
FIELD_ALIASES = {
    "estimated_gtm_type": "gtm_type",
}


# ===================
# RECORD KEYS
# ===================

def canonical_field(name: str) -> str:
    """
    Canonical snake_case name of a submitted field.

    - "productArea" → "product_area"
    - "estimatedGtmType" → "gtm_type"
    """
    snake = to_snake_case(name.strip())
    return FIELD_ALIASES.get(snake, snake)


def canonical_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Copy a record with canonical keys.

    When a record carries both an alias and the canonical key, the
    canonical key wins.
    """
    out: dict[str, Any] = {}
    for key, value in record.items():
        name = canonical_field(key)
        if name != key and name in record:
            continue
        out[name] = value
    return out


# ===================
# RESOLVER
# ===================

def match_item(raw_value: Any, items: list[ConfigItemResponse]) -> Optional[ConfigItemResponse]:
    """First active item whose label equals raw_value, ignoring case and padding."""
    key = normalize_label(raw_value)
    for item in items:
        if item.is_active and normalize_label(item.label) == key:
            return item
    return None


def resolve_fields(record: dict[str, Any], snapshot: TaxonomySnapshot) -> FieldResolution:
    """
    Check every taxonomy-backed field of a record.

    A field is mapped when its value is blank/absent or equals an active
    label of its category. Output order follows TAXONOMY_FIELDS.

    Args:
        record: Submitted values (camelCase keys accepted)
        snapshot: Active taxonomy at submission time

    Returns:
        FieldResolution with all verifications and the unmapped subset
    """
    values = canonical_record(record)
    verifications = []

    for field_name, category in TAXONOMY_FIELDS:
        raw = values.get(field_name)
        if is_blank(raw):
            verifications.append(FieldVerification(
                field_name=field_name,
                category=category,
                raw_value=raw,
                is_mapped=True
            ))
            continue

        matched = match_item(raw, snapshot.for_category(category))
        verifications.append(FieldVerification(
            field_name=field_name,
            category=category,
            raw_value=raw,
            matched_item=matched,
            is_mapped=matched is not None
        ))

    return FieldResolution(
        verifications=verifications,
        unmapped=[v for v in verifications if not v.is_mapped]
    )


def suggest_value(raw_value: Any, labels: list[str]) -> Optional[str]:
    """
    Closest existing label for an unmapped value.

    The first label that contains the value, or is contained in it,
    case-insensitively: "platform" suggests "Platform Team".
    """
    needle = normalize_label(raw_value)
    if not needle:
        return None
    for label in labels:
        candidate = normalize_label(label)
        if candidate and (needle in candidate or candidate in needle):
            return label
    return None


def build_decision_request(
    resolution: FieldResolution,
    snapshot: TaxonomySnapshot
) -> list[UnmappedField]:
    """Shape each unmapped field with its options for a reviewer."""
    request = []
    for verification in resolution.unmapped:
        options = snapshot.labels(verification.category)
        request.append(UnmappedField(
            field_name=verification.field_name,
            category=verification.category,
            raw_value=verification.raw_value,
            available_options=options,
            suggested_value=suggest_value(verification.raw_value, options)
        ))
    return request


def apply_stored_mappings(
    record: dict[str, Any],
    mappings: list[FieldMappingResponse],
    snapshot: TaxonomySnapshot
) -> dict[str, Any]:
    """
    Rewrite a record with remembered decisions.

    Values that already match an active label are left alone. Inactive
    mappings are ignored. The input record is not modified.

    Returns:
        New record with canonical keys
    """
    out = canonical_record(record)

    index: dict[tuple[str, str], FieldMappingResponse] = {}
    for mapping in mappings:
        if mapping.is_active:
            index[(canonical_field(mapping.field_name), normalize_label(mapping.source_value))] = mapping

    for field_name, category in TAXONOMY_FIELDS:
        raw = out.get(field_name)
        if is_blank(raw) or match_item(raw, snapshot.for_category(category)):
            continue

        mapping = index.get((field_name, normalize_label(raw)))
        if mapping is None:
            continue

        if mapping.target_type in VALUE_TARGET_TYPES:
            out[field_name] = mapping.target_value
        elif mapping.target_type == MappingTargetType.SKIP:
            out.pop(field_name, None)

        logger.debug(
            "stored_mapping_applied",
            field_name=field_name,
            source_value=mapping.source_value,
            target_type=mapping.target_type.value
        )

    return out


# ===================
# APPLIER
# ===================

def apply_decisions(
    record: dict[str, Any],
    decisions: list[MappingDecision],
    taxonomy
) -> MappingResult:
    """
    Apply reviewer decisions to a copy of a record.

    Decisions run in order. create-new creates the config item through
    ``taxonomy.create`` and writes the stored label; use-existing writes
    target_value as given; skip removes the field; keep-as-is leaves it.

    Args:
        record: Submitted values; not modified
        decisions: One decision per unmapped field
        taxonomy: Object with create(category, label) (TaxonomyService)

    Returns:
        MappingResult with the rewritten record and created items

    Raises:
        UnknownTaxonomyFieldError: If a decision names a field without a category
        MappingApplicationError: If a create-new fails; earlier decisions
            stay applied and the error carries the partial result
    """
    for decision in decisions:
        if canonical_field(decision.field_name) not in FIELD_CATEGORIES:
            raise UnknownTaxonomyFieldError(decision.field_name)

    out = canonical_record(record)
    created: list[ConfigItemResponse] = []
    applied: list[str] = []

    for decision in decisions:
        field_name = canonical_field(decision.field_name)

        if decision.target_type == MappingTargetType.CREATE_NEW:
            try:
                item = taxonomy.create(FIELD_CATEGORIES[field_name], decision.target_value)
            except ValidationError as e:
                partial = MappingResult(record=out, created_items=created, applied=applied)
                logger.warning(
                    "mapping_partially_applied",
                    failed_field=field_name,
                    cause=e.code,
                    applied=applied
                )
                raise MappingApplicationError(field_name, e, partial) from e
            created.append(item)
            out[field_name] = item.label

        elif decision.target_type == MappingTargetType.USE_EXISTING:
            out[field_name] = decision.target_value

        elif decision.target_type == MappingTargetType.SKIP:
            out.pop(field_name, None)

        applied.append(field_name)

    logger.info("mapping_decisions_applied", applied=applied, created=len(created))
    return MappingResult(record=out, created_items=created, applied=applied)


# ===================
# STORED MAPPINGS
# ===================

class FieldMappingService(BaseRepository[FieldMappingResponse]):
    """Remembered decisions, unique per (field_name, source_value)."""

    table = "field_mappings"
    response_model = FieldMappingResponse
    not_found_error = FieldMappingNotFoundError

    def get_all(
        self,
        field_name: Optional[str] = None,
        active_only: bool = False
    ) -> list[FieldMappingResponse]:
        query = self._select()
        if field_name:
            query = query.eq("field_name", canonical_field(field_name))
        if active_only:
            query = query.eq("is_active", True)
        return self._run_list(query, field_name=field_name)

    def create(self, data: FieldMappingCreate) -> FieldMappingResponse:
        """
        Store a mapping.

        Raises:
            FieldMappingExistsError: If the field/source value pair is taken
        """
        row = data.model_dump(mode="json")
        row["field_name"] = canonical_field(row["field_name"])

        try:
            existing = (
                self.db.table(self.table)
                .select("id")
                .eq("field_name", row["field_name"])
                .eq("source_value", row["source_value"])
                .execute()
            )
        except Exception as e:
            logger.error(
                "field_mapping_check_failed",
                field_name=row["field_name"],
                error=str(e)
            )
            raise translate_store_error("select", self.table, e) from e

        if existing.data:
            raise FieldMappingExistsError(row["field_name"], row["source_value"])

        logger.info("creating_field_mapping", field_name=row["field_name"], target_type=row["target_type"])

        try:
            return self.insert_row(row)
        except ConflictError:
            raise FieldMappingExistsError(row["field_name"], row["source_value"])

    def update(self, mapping_id: str, data: FieldMappingUpdate) -> FieldMappingResponse:
        existing = self.get_by_id(mapping_id)
        patch = data.model_dump(exclude_unset=True, mode="json")

        target_type = MappingTargetType(patch.get("target_type") or existing.target_type)
        target_value = patch.get("target_value", existing.target_value)
        if target_type in VALUE_TARGET_TYPES and not target_value:
            raise ValidationError(
                message=f"target_value is required for {target_type.value}",
                details={"field": "target_value"}
            )

        return self.update_row(mapping_id, patch, existing=existing)

    def delete(self, mapping_id: str) -> None:
        self.delete_row(mapping_id)
        logger.info("field_mapping_deleted", mapping_id=mapping_id)

    def remember(
        self,
        record: dict[str, Any],
        decisions: list[MappingDecision],
        created_by_id: Optional[str] = None
    ) -> list[FieldMappingResponse]:
        """
        Upsert decisions keyed by (field_name, source value in record).

        Decisions for fields that are blank in the record are not stored.

        Returns:
            Stored mapping rows
        """
        values = canonical_record(record)
        rows: dict[tuple[str, str], dict] = {}

        for decision in decisions:
            field_name = canonical_field(decision.field_name)
            source = values.get(field_name)
            if is_blank(source):
                continue
            source_value = str(source).strip()
            rows[(field_name, source_value)] = {
                "field_name": field_name,
                "source_value": source_value,
                "target_value": decision.target_value,
                "target_type": decision.target_type.value,
                "is_active": True,
                "created_by_id": created_by_id,
            }

        if not rows:
            return []

        try:
            result = (
                self.db.table(self.table)
                .upsert(list(rows.values()), on_conflict="field_name,source_value")
                .execute()
            )
        except Exception as e:
            logger.error("remember_mappings_failed", count=len(rows), error=str(e))
            raise translate_store_error("upsert", self.table, e) from e

        logger.info("field_mappings_remembered", count=len(rows))
        return [self._to_response(row) for row in (result.data or [])]


# Singleton instance for convenience
_field_mapping_service: Optional[FieldMappingService] = None


def get_field_mapping_service() -> FieldMappingService:
    """Get or create FieldMappingService instance."""
    global _field_mapping_service
    if _field_mapping_service is None:
        _field_mapping_service = FieldMappingService()
    return _field_mapping_service
