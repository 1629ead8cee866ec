"""
api.dependencies - FastAPI dependency injection providers.

Provides access to core services through FastAPI's dependency injection system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends

if TYPE_CHECKING:
    from lootfilter.app_context import AppContext
    from lootfilter.filter_service import FilterService


def get_app_context() -> "AppContext":
    """
    Get the global application context.

    Must be called after app startup (lifespan context).
    """
    from api.main import get_app_context as _get_ctx

    return _get_ctx()


def get_filter_service(
    ctx: "AppContext" = Depends(get_app_context),
) -> "FilterService":
    """The filter service of the application context."""
    return ctx.filter_service
