"""
api.middleware.error_handling - Global error handling for API.

Provides consistent error responses across all endpoints:

    {"error": true, "status_code": 404, "message": "...", "path": "/api/v1/..."}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lootfilter.exceptions import (
    FilterFileError,
    FilterNotFoundError,
    FilterServiceError,
)

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, message: Any, **extra: Any) -> JSONResponse:
    content = {
        "error": True,
        "status_code": status_code,
        "message": message,
        "path": str(request.url.path),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def setup_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(request, exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle validation errors with detailed feedback."""
        errors: list[dict[str, Any]] = []
        for error in exc.errors():
            errors.append({
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })
        return _error_response(request, 422, "Validation error", details=errors)

    @app.exception_handler(FilterServiceError)
    async def filter_service_exception_handler(
        request: Request, exc: FilterServiceError
    ) -> JSONResponse:
        """Map filter service errors to 404 / 400."""
        if isinstance(exc, FilterNotFoundError):
            return _error_response(request, 404, str(exc))
        if isinstance(exc, FilterFileError):
            return _error_response(request, 400, str(exc))
        logger.warning(f"Filter service error on {request.url.path}: {exc}")
        return _error_response(request, 400, str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error on {request.url.path}: {exc}")

        # Don't expose internal details in production
        return _error_response(request, 500, "Internal server error")
