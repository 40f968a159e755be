"""
Rate limit headers middleware.

Reads ``request.state.rate_limit_info`` (set by the rate limit
dependencies) and adds the standard headers to the response:

- X-RateLimit-Limit
- X-RateLimit-Remaining
- Retry-After (only when the request was rejected)
"""

from starlette.middleware.base import BaseHTTPMiddleware


class RateLimitHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)

        info = getattr(request.state, "rate_limit_info", None)
        if not info:
            return response

        if info.get("limit") is not None:
            response.headers["X-RateLimit-Limit"] = str(info["limit"])
        if info.get("remaining") is not None:
            response.headers["X-RateLimit-Remaining"] = str(info["remaining"])
        if not info.get("allowed", True) and info.get("retry_after") is not None:
            response.headers["Retry-After"] = str(info["retry_after"])

        return response
