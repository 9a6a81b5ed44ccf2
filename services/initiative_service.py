"""
Initiative service for CRUD operations.

See models/initiative.py for the schema. Taxonomy-backed fields are stored
as labels; reconciliation happens before create_from_record().
"""

from collections import Counter
from datetime import date
from typing import Any, Optional
import structlog
from pydantic import ValidationError as PydanticValidationError

from models.initiative import (
    ExecutiveSummary,
    ExecutiveUpdateRequest,
    InitiativeCreate,
    InitiativeUpdate,
    InitiativeResponse,
    InitiativeStats,
)
from exceptions import (
    InitiativeNotFoundError,
    InvalidDateRangeError,
    ValidationError,
)
from services.base_repository import BaseRepository
from utils.text_utils import normalize_label

logger = structlog.get_logger(__name__)

UNASSIGNED_STATUS = "Unassigned"

# Default status/priority labels the executive summary counts by
COMPLETE_STATUS = "complete"
ON_TRACK_STATUS = "on track"
AT_RISK_STATUSES = frozenset({"at risk", "off track"})
CRITICAL_PRIORITY = "critical"


def check_date_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    """Raise InvalidDateRangeError when both bounds are set and reversed."""
    if start_date and end_date and end_date < start_date:
        raise InvalidDateRangeError(start_date.isoformat(), end_date.isoformat())


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _overview(total: int, completed: int, average: float, at_risk: int) -> str:
    """Generated paragraph shown when no summary text was written."""
    if at_risk:
        verb = "requires" if at_risk == 1 else "require"
        status_text = f"{_plural(at_risk, 'initiative')} {verb} attention"
    else:
        status_text = "All initiatives are on track"

    return (
        f"This executive summary provides an overview of our "
        f"{_plural(total, 'strategic initiative')}. We have completed "
        f"{_plural(completed, 'initiative')} with an average progress of "
        f"{average:.1f}%. {status_text}."
    )


class InitiativeService(BaseRepository[InitiativeResponse]):
    """
    Initiative business logic.

    Handles CRUD operations, filters and dashboard stats.
    """

    table = "initiatives"
    response_model = InitiativeResponse
    not_found_error = InitiativeNotFoundError

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        owner_id: Optional[str] = None,
        created_by_id: Optional[str] = None,
        status: Optional[str] = None,
        tier: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> list[InitiativeResponse]:
        """
        Get initiatives with optional filters, newest first.

        The date range keeps initiatives that overlap it (both ends
        inclusive): start_date <= range end and end_date >= range start.

        Args:
            owner_id: Filter by owner
            created_by_id: Filter by creator
            status: Filter by status label
            tier: Filter by tier
            start_date: Range start
            end_date: Range end

        Returns:
            List of InitiativeResponse

        Raises:
            InvalidDateRangeError: If end_date is before start_date
        """
        check_date_range(start_date, end_date)

        query = self._select()
        if owner_id:
            query = query.eq("owner_id", owner_id)
        if created_by_id:
            query = query.eq("created_by_id", created_by_id)
        if status:
            query = query.eq("status", status)
        if tier is not None:
            query = query.eq("tier", tier)
        if end_date:
            query = query.lte("start_date", end_date.isoformat())
        if start_date:
            query = query.gte("end_date", start_date.isoformat())

        return self._run_list(
            query,
            owner_id=owner_id,
            status=status,
            tier=tier,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None
        )

    def stats(self) -> InitiativeStats:
        """Totals for the dashboard header."""
        initiatives = self.get_all()
        by_status = Counter(i.status or UNASSIGNED_STATUS for i in initiatives)

        overall = 0.0
        if initiatives:
            overall = round(sum(i.progress for i in initiatives) / len(initiatives), 1)

        return InitiativeStats(
            total=len(initiatives),
            by_status=dict(by_status),
            overall_progress=overall
        )

    def executive_summary(self) -> ExecutiveSummary:
        """
        Key metrics and highlighted initiatives for the executive summary.

        Status and priority labels are compared case-insensitively against
        the default taxonomy ("Complete", "On Track", "At Risk", "Off Track",
        "Critical").

        Returns:
            ExecutiveSummary with counts, rates, flagged and critical lists
        """
        initiatives = self.get_all()
        statuses = [normalize_label(i.status) for i in initiatives]
        total = len(initiatives)

        completed = statuses.count(COMPLETE_STATUS)
        at_risk = sum(1 for s in statuses if s in AT_RISK_STATUSES)
        average = round(sum(i.progress for i in initiatives) / total, 1) if total else 0.0
        completion_rate = round(completed / total * 100, 1) if total else 0.0

        critical = [i for i in initiatives if normalize_label(i.priority) == CRITICAL_PRIORITY]
        needs_attention = [
            i for i in initiatives
            if normalize_label(i.priority) == CRITICAL_PRIORITY
            or normalize_label(i.status) in AT_RISK_STATUSES
        ]

        summary = ExecutiveSummary(
            total=total,
            completed=completed,
            in_progress=statuses.count(ON_TRACK_STATUS),
            at_risk=at_risk,
            average_progress=average,
            completion_rate=completion_rate,
            critical=critical,
            flagged=[i for i in initiatives if i.show_on_executive_summary],
            needs_attention=needs_attention,
            overview=_overview(total, completed, average, at_risk)
        )

        logger.info(
            "executive_summary_built",
            total=total,
            at_risk=at_risk,
            flagged=len(summary.flagged)
        )
        return summary

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: InitiativeCreate) -> InitiativeResponse:
        """
        Create a new initiative.

        Args:
            data: Validated initiative data

        Returns:
            Created InitiativeResponse
        """
        logger.info("creating_initiative", title=data.title, team=data.team)

        initiative = self.insert_row(data.model_dump(mode="json"))

        logger.info("initiative_created", initiative_id=initiative.id)
        return initiative

    def create_from_record(
        self,
        record: dict[str, Any],
        created_by_id: Optional[str] = None
    ) -> InitiativeResponse:
        """
        Validate a reconciled record and create the initiative.

        Raises:
            ValidationError: If the record does not satisfy InitiativeCreate
        """
        values = dict(record)
        if created_by_id and not values.get("created_by_id"):
            values["created_by_id"] = created_by_id
        if not values.get("owner_id") and values.get("created_by_id"):
            values["owner_id"] = values["created_by_id"]

        try:
            data = InitiativeCreate.model_validate(values)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Initiative record is invalid",
                details={
                    "errors": [
                        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                        for err in e.errors()
                    ]
                }
            )
        return self.create(data)

    def update(self, initiative_id: str, data: InitiativeUpdate) -> InitiativeResponse:
        """
        Update an initiative; only provided fields change.

        Raises:
            InitiativeNotFoundError: If the initiative does not exist
            InvalidDateRangeError: If the merged dates are reversed
        """
        existing = self.get_by_id(initiative_id)
        patch = data.model_dump(exclude_unset=True, mode="json")

        start = data.start_date if "start_date" in patch else existing.start_date
        end = data.end_date if "end_date" in patch else existing.end_date
        check_date_range(start, end)

        logger.info("updating_initiative", initiative_id=initiative_id, fields=list(patch.keys()))
        return self.update_row(initiative_id, patch, existing=existing)

    def set_executive_update(
        self,
        initiative_id: str,
        data: ExecutiveUpdateRequest
    ) -> InitiativeResponse:
        """
        Save a stakeholder update and (by default) flag the initiative
        for the executive summary.

        Raises:
            InitiativeNotFoundError: If the initiative does not exist
        """
        existing = self.get_by_id(initiative_id)

        patch = {
            "executive_update": data.executive_update,
            "show_on_executive_summary": data.show_on_executive_summary,
        }
        if data.reason_if_not_on_track is not None:
            patch["reason_if_not_on_track"] = data.reason_if_not_on_track
        if data.updated_by_id:
            patch["last_updated_by_id"] = data.updated_by_id

        logger.info(
            "executive_update_saved",
            initiative_id=initiative_id,
            flagged=data.show_on_executive_summary
        )
        return self.update_row(initiative_id, patch, existing=existing)

    def delete(self, initiative_id: str) -> None:
        """
        Delete an initiative.

        Raises:
            InitiativeNotFoundError: If the initiative does not exist
        """
        self.delete_row(initiative_id)
        logger.info("initiative_deleted", initiative_id=initiative_id)


# Singleton instance for convenience
_initiative_service: Optional[InitiativeService] = None


def get_initiative_service() -> InitiativeService:
    """Get or create InitiativeService instance."""
    global _initiative_service
    if _initiative_service is None:
        _initiative_service = InitiativeService()
    return _initiative_service
