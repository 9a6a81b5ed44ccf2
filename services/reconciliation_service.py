"""
Reconciliation service.

Ties the taxonomy, stored field mappings and initiative creation together:

1. reconcile(): rewrite a submission with stored mappings and list the
   fields that still have no matching config item.
2. apply(): apply the reviewer's decisions, optionally remember them and
   create the initiative from the rewritten record.
"""

from typing import Any, Optional
import structlog

from models.field_mapping import (
    ApplyDecisionsRequest,
    ApplyDecisionsResponse,
    ReconcileResponse,
)
from services.field_mapping_service import (
    FieldMappingService,
    apply_decisions,
    apply_stored_mappings,
    build_decision_request,
    canonical_record,
    get_field_mapping_service,
    resolve_fields,
)
from services.initiative_service import InitiativeService, get_initiative_service
from services.taxonomy_service import TaxonomyService, get_taxonomy_service

logger = structlog.get_logger(__name__)


class ReconciliationService:
    """Submission-time taxonomy reconciliation."""

    def __init__(
        self,
        taxonomy: Optional[TaxonomyService] = None,
        mappings: Optional[FieldMappingService] = None,
        initiatives: Optional[InitiativeService] = None
    ):
        self.taxonomy = taxonomy or get_taxonomy_service()
        self.mappings = mappings or get_field_mapping_service()
        self.initiatives = initiatives or get_initiative_service()

    def reconcile(self, record: dict[str, Any], apply_stored: bool = True) -> ReconcileResponse:
        """
        Check a submission against the current taxonomy.

        Args:
            record: Submitted initiative values
            apply_stored: Rewrite with remembered mappings first

        Returns:
            ReconcileResponse with the (possibly rewritten) record and the
            decision request for unmapped fields
        """
        snapshot = self.taxonomy.snapshot()

        if apply_stored:
            values = apply_stored_mappings(
                record,
                self.mappings.get_all(active_only=True),
                snapshot
            )
        else:
            values = canonical_record(record)

        resolution = resolve_fields(values, snapshot)
        unmapped = build_decision_request(resolution, snapshot)

        logger.info(
            "record_reconciled",
            unmapped=[u.field_name for u in unmapped],
            apply_stored=apply_stored
        )

        return ReconcileResponse(
            record=values,
            verifications=resolution.verifications,
            unmapped=unmapped,
            is_complete=resolution.is_complete
        )

    def apply(self, request: ApplyDecisionsRequest) -> ApplyDecisionsResponse:
        """
        Apply decisions, then optionally remember them and create the initiative.

        Raises:
            MappingApplicationError: If a create-new decision fails part way
            ValidationError: If the rewritten record is not a valid initiative
        """
        result = apply_decisions(request.record, request.decisions, self.taxonomy)

        remembered = []
        if request.remember:
            remembered = self.mappings.remember(
                request.record,
                request.decisions,
                created_by_id=request.created_by_id
            )

        initiative = None
        if request.create_initiative:
            initiative = self.initiatives.create_from_record(
                result.record,
                created_by_id=request.created_by_id
            )

        return ApplyDecisionsResponse(
            record=result.record,
            applied=result.applied,
            created_items=result.created_items,
            remembered=remembered,
            initiative=initiative
        )


# Singleton instance for convenience
_reconciliation_service: Optional[ReconciliationService] = None


def get_reconciliation_service() -> ReconciliationService:
    """Get or create ReconciliationService instance."""
    global _reconciliation_service
    if _reconciliation_service is None:
        _reconciliation_service = ReconciliationService()
    return _reconciliation_service
