"""
Executive Dashboard API: Main Application

FastAPI application entry point.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import structlog
from datetime import datetime, timezone

from config import settings, check_connection

# structlog renders through stdlib loggers; without a root handler and level
# only WARNING and above reach the console and log_level has no effect
logging.basicConfig(format="%(message)s", level=settings.log_level)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: Check database connection
    Shutdown: Clean up resources
    """
    # Startup
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug
    )

    # Check database connection
    db_status = check_connection()
    if db_status["status"] == "healthy":
        logger.info(
            "database_connected",
            initiatives=db_status["initiatives_count"],
            config_items=db_status["config_items_count"]
        )
    else:
        logger.error(
            "database_connection_failed",
            error=db_status.get("error")
        )

    yield

    # Shutdown
    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title="Executive Dashboard API",
    description="Strategic initiatives, achievements and configurable taxonomies",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Executive Dashboard API",
        "version": "0.1.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/api/health",
    }


# ===================
# ERROR HANDLERS
# ===================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query validation failures in the standard envelope."""
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info("request_validation_failed", path=request.url.path, errors=len(errors))

    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Request validation failed",
            "code": "VALIDATION_ERROR",
            "details": {"errors": errors},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Catches unhandled exceptions and returns standard error format.
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
            "details": {"error": str(exc)} if settings.debug else {},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    )


# ===================
# INCLUDE ROUTERS
# ===================
from routes.health import router as health_router
from routes.users import router as users_router
from routes.initiatives import router as initiatives_router
from routes.achievements import router as achievements_router
from routes.config import router as config_router
from routes.calendar import router as calendar_router

app.include_router(health_router, prefix="/api/health", tags=["Health"])
app.include_router(users_router, prefix="/api/users", tags=["Users"])
app.include_router(initiatives_router, prefix="/api/initiatives", tags=["Initiatives"])
app.include_router(achievements_router, prefix="/api/achievements", tags=["Achievements"])
app.include_router(config_router, prefix="/api/config", tags=["Config"])
app.include_router(calendar_router, prefix="/api/calendar", tags=["Calendar"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
