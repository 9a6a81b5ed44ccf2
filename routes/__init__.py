"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.health import router as health_router
from routes.users import router as users_router
from routes.initiatives import router as initiatives_router
from routes.achievements import router as achievements_router
from routes.config import router as config_router
from routes.calendar import router as calendar_router

__all__ = [
    "health_router",
    "users_router",
    "initiatives_router",
    "achievements_router",
    "config_router",
    "calendar_router",
]
