"""
Request context middleware.

Gives every request an ID, taken from an incoming X-Request-ID header or
generated, and binds it to the structlog context so every log line written
while handling the request carries it. The ID is echoed back in the
X-Request-ID response header.
"""

import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


def _request_id_from(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER)
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id (and client IP) to request.state and the log context."""

    async def dispatch(self, request: Request, call_next):
        request_id = _request_id_from(request)
        request.state.request_id = request_id
        request.state.ip_address = request.client.host if request.client else None

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
