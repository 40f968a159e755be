"""
Rate Limit Dependencies - rate limiting for endpoints as FastAPI dependencies.

Usage:
    from app.middleware.rate_limit_dependencies import rate_limit_service_request_creation

    @router.post("", dependencies=[Depends(rate_limit_service_request_creation)])
    async def create_service_request(...):
        ...
"""

from fastapi import Depends, HTTPException, Request, status

from app.auth.verify import auth_dependency
from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limiter import rate_limiter

logger = get_logger(__name__)


async def rate_limit_service_request_creation(
    request: Request,
    claims: dict = Depends(auth_dependency),
) -> None:
    """
    Per-user limit on creating service requests.

    Falls back to the client IP when the token carries no subject.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    if not settings.RATE_LIMIT_ENABLED:
        return

    subject = claims.get("sub") or (request.client.host if request.client else "unknown")

    allowed, info = await rate_limiter.check_rate_limit(
        key=f"service_requests:{subject}",
        limit=settings.SERVICE_REQUEST_RATE_LIMIT,
        window_seconds=settings.SERVICE_REQUEST_RATE_WINDOW_SECONDS,
    )

    request.state.rate_limit_info = info

    if not allowed:
        logger.warning(
            "Service request rate limit exceeded",
            subject=subject,
            limit=info["limit"],
            retry_after=info["retry_after"],
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "rate_limit_exceeded",
                "message": "Too many requests from this user, please try again later.",
                "limit": info["limit"],
                "retry_after": info["retry_after"],
            },
            headers={"Retry-After": str(info["retry_after"])},
        )
