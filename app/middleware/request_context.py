"""
RequestContext Middleware - Adds request tracking to all requests.

Adds to request.state:
- request_id: Unique ID for request tracing (reuses an incoming X-Request-ID)
- ip_address: Client IP address

The request_id is also bound to the structlog context so every log line
emitted while handling the request carries it, and it is echoed back in the
X-Request-ID response header.
"""

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.infrastructure.observability.logging import bind_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = self._incoming_request_id(request) or str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.ip_address = request.client.host if request.client else None

        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)

        logger.debug("Request started", ip_address=request.state.ip_address)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _incoming_request_id(request: Request) -> str | None:
        value = request.headers.get(REQUEST_ID_HEADER.lower())
        if value and len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable():
            return value
        return None
