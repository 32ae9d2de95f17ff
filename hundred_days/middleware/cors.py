"""Origin allow-list enforcement in front of Starlette's CORS middleware."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from hundred_days.errors import CorsRejectedError
from hundred_days.schemas.envelope import error_response

logger = logging.getLogger(__name__)

CORS_REJECTED_MESSAGE = (
    "The CORS policy for this site does not allow access from the specified Origin."
)


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Deny requests carrying an ``Origin`` that is not on the allow-list.

    Requests without an ``Origin`` header (curl, server-to-server, mobile
    apps) pass through. ``CORSMiddleware`` only withholds response headers
    and leaves the browser to block, this rejects the request outright.
    """

    def __init__(self, app, *, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins}
        self.allow_all = "*" in self.allowed_origins

    def is_allowed(self, origin: str | None) -> bool:
        if not origin or self.allow_all:
            return True
        return origin.rstrip("/") in self.allowed_origins

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if not self.is_allowed(origin):
            logger.warning(
                "Rejected cross-origin request origin=%s path=%s",
                origin,
                request.url.path,
            )
            return error_response(CorsRejectedError(CORS_REJECTED_MESSAGE))
        return await call_next(request)
