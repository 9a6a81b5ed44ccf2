"""
Database connection management.

Provides the Supabase client singleton used by every repository.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions.errors import ExternalServiceError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ExternalServiceError: If the client cannot be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info("supabase_connected", status="success")

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ExternalServiceError(
            "supabase",
            "Failed to connect to the database"
        ) from e


def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with row counts for the core tables
    """
    try:
        client = get_supabase_client()

        initiatives = client.table("initiatives").select("id", count="exact").execute()
        config_items = client.table("config_items").select("id", count="exact").execute()

        return {
            "status": "healthy",
            "initiatives_count": initiatives.count,
            "config_items_count": config_items.count
        }

    except Exception as e:
        logger.error("health_check_failed", error=str(e))
        return {
            "status": "unhealthy",
            "error": str(e)
        }
