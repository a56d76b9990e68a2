"""Request ID middleware for request tracing."""

import re
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs are echoed back, so only accept short, header-safe values
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{8,128}")


def is_valid_request_id(value: str | None) -> bool:
    """Check whether a client-supplied request ID can be reused."""
    return bool(value) and _VALID_REQUEST_ID.fullmatch(value) is not None


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to ``request.state`` and the response headers.

    The incoming X-Request-ID header is kept when valid, otherwise a new
    UUID is generated.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not is_valid_request_id(request_id):
            request_id = generate_request_id()

        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
