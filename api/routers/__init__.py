"""API routers package."""

from api.routers.health import router as health_router
from api.routers.filters import router as filters_router
from api.routers.settings import router as settings_router

__all__ = [
    "health_router",
    "filters_router",
    "settings_router",
]
