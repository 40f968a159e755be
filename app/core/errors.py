"""
Domain error taxonomy shared by services, repositories and routers.

Routers never translate these by hand: exception handlers registered in
app.core.error_handlers map each class to an HTTP status.
"""

from typing import Any


class MarketplaceError(Exception):
    """Base exception for marketplace operations."""

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        recoverable: bool = True,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.recoverable = recoverable
        self.details = details or {}


class ValidationError(MarketplaceError):
    """Bad transition request or malformed input. Caller-fixable."""


class InvalidTransitionError(ValidationError):
    """Requested status is not reachable from the current status."""

    def __init__(self, current_status: str, attempted_status: str):
        super().__init__(
            f"Cannot change status from {current_status} to {attempted_status}",
            operation="update_status",
            details={"current_status": current_status, "attempted_status": attempted_status},
        )
        self.current_status = current_status
        self.attempted_status = attempted_status


class PermissionDeniedError(MarketplaceError):
    """Caller is not allowed to act on the resource."""


class NotFoundError(MarketplaceError):
    """Referenced project, request or provider does not exist."""


class StoreError(MarketplaceError):
    """Underlying persistence failure (relational or snapshot store)."""

    def __init__(self, message: str, operation: str = "unknown", recoverable: bool = False):
        super().__init__(message, operation=operation, recoverable=recoverable)
