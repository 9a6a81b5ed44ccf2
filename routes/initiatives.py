"""
Initiative API routes.

Also hosts the reconciliation endpoints that check a submission's
taxonomy values before the initiative is created.
"""

from fastapi import APIRouter, Query
from fastapi.responses import Response
from typing import Literal, Optional
from datetime import date
import structlog

from models.initiative import ExecutiveUpdateRequest, InitiativeCreate, InitiativeUpdate
from models.field_mapping import ApplyDecisionsRequest, ReconcileRequest
from services.initiative_service import get_initiative_service
from services.reconciliation_service import get_reconciliation_service
from services.user_service import get_user_service
from services.export_service import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    export_filename,
    get_export_service,
)
from exceptions import InitiativeNotFoundError
from routes.common import handle_error, lookup_response, success

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# ROUTES
# ===================

@router.get("")
async def list_initiatives(
    owner_id: Optional[str] = Query(None, description="Filter by owner"),
    creator_id: Optional[str] = Query(None, description="Filter by creator"),
    status: Optional[str] = Query(None, description="Filter by status label"),
    tier: Optional[int] = Query(None, ge=1, le=3, description="Filter by tier"),
    start_date: Optional[date] = Query(None, description="Overlap range start"),
    end_date: Optional[date] = Query(None, description="Overlap range end")
):
    """
    List initiatives with optional filters.

    The date range keeps initiatives that overlap it.
    """
    try:
        service = get_initiative_service()
        initiatives = service.get_all(
            owner_id=owner_id,
            created_by_id=creator_id,
            status=status,
            tier=tier,
            start_date=start_date,
            end_date=end_date
        )
        return success(initiatives, meta={"total": len(initiatives)})
    except Exception as e:
        return handle_error(e)


@router.get("/stats")
async def get_initiative_stats():
    """Total, per-status counts and mean progress."""
    try:
        return success(get_initiative_service().stats())
    except Exception as e:
        return handle_error(e)


@router.get("/summary")
async def get_executive_summary():
    """Key metrics plus flagged, critical and at-risk initiatives."""
    try:
        return success(get_initiative_service().executive_summary())
    except Exception as e:
        return handle_error(e)


@router.get("/export")
async def export_initiatives(
    format: Literal["csv", "xlsx"] = Query("csv", description="csv or xlsx (executive report)"),
    owner_id: Optional[str] = Query(None, description="Filter by owner"),
    status: Optional[str] = Query(None, description="Filter by status label"),
    tier: Optional[int] = Query(None, ge=1, le=3, description="Filter by tier"),
    start_date: Optional[date] = Query(None, description="Overlap range start"),
    end_date: Optional[date] = Query(None, description="Overlap range end")
):
    """
    Download initiatives.

    csv: one row per initiative. xlsx: executive report with summary,
    initiative list and needs-attention sheets.
    """
    try:
        service = get_initiative_service()
        initiatives = service.get_all(
            owner_id=owner_id,
            status=status,
            tier=tier,
            start_date=start_date,
            end_date=end_date
        )
        owners = {user.id: user.name for user in get_user_service().get_all()}
        exporter = get_export_service()

        if format == "xlsx":
            content = exporter.initiatives_excel(
                initiatives, service.executive_summary(), owners
            ).getvalue()
            media_type = XLSX_MEDIA_TYPE
            filename = export_filename("executive-report", "xlsx")
        else:
            content = exporter.initiatives_csv(initiatives, owners)
            media_type = CSV_MEDIA_TYPE
            filename = export_filename("initiatives", "csv")

        logger.info("initiatives_exported", format=format, count=len(initiatives))
        return Response(
            content=content,
            media_type=media_type,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )
    except Exception as e:
        return handle_error(e)


@router.get("/{initiative_id}")
async def get_initiative(initiative_id: str):
    """Get a single initiative by ID."""
    try:
        lookup = get_initiative_service().find(initiative_id)
        return lookup_response(lookup, InitiativeNotFoundError)
    except Exception as e:
        return handle_error(e)


@router.post("", status_code=201)
async def create_initiative(data: InitiativeCreate):
    """Create a new initiative."""
    try:
        initiative = get_initiative_service().create(data)
        return success(initiative, status_code=201)
    except Exception as e:
        return handle_error(e)


@router.patch("/{initiative_id}")
async def update_initiative(initiative_id: str, data: InitiativeUpdate):
    """Update an initiative; only provided fields change."""
    try:
        return success(get_initiative_service().update(initiative_id, data))
    except Exception as e:
        return handle_error(e)


@router.put("/{initiative_id}/executive-update")
async def set_executive_update(initiative_id: str, data: ExecutiveUpdateRequest):
    """Save a stakeholder update and flag the initiative for the executive summary."""
    try:
        return success(get_initiative_service().set_executive_update(initiative_id, data))
    except Exception as e:
        return handle_error(e)


@router.delete("/{initiative_id}")
async def delete_initiative(initiative_id: str):
    """Delete an initiative."""
    try:
        get_initiative_service().delete(initiative_id)
        return success({"id": initiative_id, "message": "Initiative deleted"})
    except Exception as e:
        return handle_error(e)


# ===================
# RECONCILIATION
# ===================

@router.post("/reconcile")
async def reconcile_initiative(data: ReconcileRequest):
    """
    Check a submission against the taxonomy.

    Returns the record (rewritten by stored mappings) and, for each value
    without a matching config item, the options a reviewer can pick from.
    """
    try:
        result = get_reconciliation_service().reconcile(data.record, apply_stored=data.apply_stored)
        return success(result, meta={"unmapped": len(result.unmapped)})
    except Exception as e:
        return handle_error(e)


@router.post("/reconcile/apply")
async def apply_reconciliation(data: ApplyDecisionsRequest):
    """
    Apply reviewer decisions to a submission.

    create-new decisions add config items. A failure part way returns
    MAPPING_PARTIALLY_APPLIED with what was already applied.
    """
    try:
        result = get_reconciliation_service().apply(data)
        return success(result, status_code=201 if result.initiative else 200)
    except Exception as e:
        return handle_error(e)
