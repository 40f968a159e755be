"""
Exception handlers translating domain errors into consistent JSON responses.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.errors import (
    MarketplaceError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[MarketplaceError], int, str]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN, "permission_denied"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR, "store_error"),
]


def _error_body(error_code: str, message: str, details: Any | None = None) -> dict[str, Any]:
    return {
        "status": "error",
        "error_code": error_code,
        "message": message,
        "details": details or None,
    }


def resolve_status(exc: MarketplaceError) -> tuple[int, str]:
    """Return (http_status, error_code) for a domain error."""
    for error_cls, http_status, error_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return http_status, error_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        http_status, error_code = resolve_status(exc)

        if isinstance(exc, StoreError):
            # Store internals stay in the logs
            logger.error(
                "Store error while handling request",
                path=request.url.path,
                operation=exc.operation,
                error=exc.message,
            )
            body = _error_body(error_code, "Internal storage error")
        else:
            body = _error_body(error_code, exc.message, exc.details)

        return JSONResponse(status_code=http_status, content=body)
