"""API key authentication for the report endpoints."""

import hmac
import logging
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from healthchecker.config import Settings
from healthchecker.utils.errors import ErrorCode, create_error_response

logger = logging.getLogger(__name__)

# Probe endpoints stay reachable without credentials
PUBLIC_PATHS = frozenset({"/health", "/health/live", "/health/ready"})


def extract_api_key(request: Request) -> str | None:
    """Read an API key from X-API-Key or an ``Authorization: Bearer`` header."""
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return api_key

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer ") :] or None
    return None


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Reject requests without a configured API key.

    Modes:
    - none: every request is allowed (development only)
    - api_key: X-API-Key or Authorization Bearer must match a configured key
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.auth = settings.auth

        if self.auth.mode == "none":
            logger.warning(
                "Authentication is DISABLED. This should only be used in development.",
            )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        if self.auth.mode == "none" or request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        api_key = extract_api_key(request)
        if api_key is None:
            return self._error(ErrorCode.AUTH_REQUIRED, request)

        key_name = self._match(api_key)
        if key_name is None:
            logger.warning("Invalid API key provided")
            return self._error(ErrorCode.AUTH_INVALID, request)

        logger.debug(f"API key {key_name!r} accepted")
        return await call_next(request)

    def _match(self, api_key: str) -> str | None:
        for key_config in self.auth.api_keys:
            if hmac.compare_digest(key_config.key.encode(), api_key.encode()):
                return key_config.name
        return None

    def _error(self, code: ErrorCode, request: Request) -> JSONResponse:
        body = create_error_response(
            code,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=401, content=body.model_dump(mode="json"))
