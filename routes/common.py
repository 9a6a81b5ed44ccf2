"""
Shared helpers for route modules: response envelope and error conversion.

Success:  {"success": true, "data": ..., "meta": {...}}
Failure:  {"success": false, "error": "...", "code": "...", "details": {...}}
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import structlog

from config.settings import get_settings
from exceptions import AppError, DatabaseError, NotFoundError

from models.result import Found, NotFound, Lookup

logger = structlog.get_logger(__name__)


def success(data: Any = None, meta: Optional[dict] = None, status_code: int = 200) -> JSONResponse:
    """Wrap data in the success envelope."""
    content = {"success": True, "data": data}
    if meta is not None:
        content["meta"] = meta
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        content = e.to_dict()
        if isinstance(e, DatabaseError):
            logger.error("database_error", operation=e.details.get("operation"), cause=e.cause)
            if get_settings().debug:
                content["details"] = {**content["details"], "cause": e.cause}
        return JSONResponse(
            status_code=e.status_code,
            content=jsonable_encoder(content)
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
            "details": {},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    )


def lookup_response(lookup: Lookup, not_found_error: type[NotFoundError]) -> JSONResponse:
    """
    Turn a tagged lookup into a response.

    Found → success envelope, NotFound → the entity's 404,
    Failed → DATABASE_ERROR.
    """
    if isinstance(lookup, Found):
        return success(lookup.value)
    if isinstance(lookup, NotFound):
        return handle_error(not_found_error(lookup.id))
    return handle_error(DatabaseError("select", lookup.detail))
