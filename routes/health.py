"""
Health API routes.
"""

from datetime import datetime, timezone
from fastapi import APIRouter

from config import settings, check_connection
from routes.common import success

router = APIRouter()

ENDPOINTS = {
    "users": "/api/users",
    "initiatives": "/api/initiatives",
    "executive_summary": "/api/initiatives/summary",
    "export": "/api/initiatives/export",
    "achievements": "/api/achievements",
    "config_items": "/api/config/items",
    "navigation": "/api/config/navigation",
    "field_configurations": "/api/config/field-configurations",
    "field_mappings": "/api/config/field-mappings",
    "calendar": "/api/calendar",
}


@router.get("")
async def health_check():
    """
    Service and database status.

    Returns:
        "healthy" when the database answers, "degraded" otherwise
    """
    db_status = check_connection()

    return success({
        "status": "healthy" if db_status["status"] == "healthy" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "database": db_status,
        "endpoints": ENDPOINTS,
    })
