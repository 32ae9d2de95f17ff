"""Request body size cap."""

from __future__ import annotations

from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from hundred_days.errors import AppError
from hundred_days.schemas.envelope import error_response

TOO_LARGE_MESSAGE = "Request entity too large"


class RequestBodyTooLarge(HTTPException):
    """Raised from ``receive`` once a streamed body passes the cap."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=TOO_LARGE_MESSAGE,
        )


def _too_large():
    return error_response(
        AppError(
            TOO_LARGE_MESSAGE,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    )


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_bytes``.

    A declared ``Content-Length`` over the cap is refused before the app
    runs. Bodies without one (chunked uploads) are counted as they arrive,
    and reading past the cap raises ``RequestBodyTooLarge`` inside the app
    so the usual HTTP error handler renders the 413 envelope.
    """

    def __init__(self, app: ASGIApp, *, max_bytes: int = 10 * 1024 * 1024) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                response = error_response(AppError("Invalid Content-Length header"))
                await response(scope, receive, send)
                return
            if size > self.max_bytes:
                await _too_large()(scope, receive, send)
                return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise RequestBodyTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except RequestBodyTooLarge:
            # Only reached when no handler inside turned it into a response
            if response_started:
                raise
            await _too_large()(scope, receive, send)
