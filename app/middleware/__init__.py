"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID bound to the log context)
- Rate limiting (sliding-window limiter, FastAPI dependencies, response headers)
"""

from app.middleware.rate_limit_headers import RateLimitHeadersMiddleware
from app.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RateLimitHeadersMiddleware",
    "RequestContextMiddleware",
]
