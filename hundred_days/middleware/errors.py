"""Render unexpected errors as the 500 envelope inside the middleware stack."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

ErrorHandler = Callable[[Request, Exception], Awaitable[Response]]


class ErrorEnvelopeMiddleware:
    """Turn exceptions escaping the router into a response.

    Starlette runs the ``Exception`` handler outside every user middleware;
    handled here, 500 responses still pick up security and CORS headers.
    """

    def __init__(self, app: ASGIApp, *, handler: ErrorHandler) -> None:
        self.app = app
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception as exc:
            if response_started:
                raise
            response = await self.handler(Request(scope), exc)
            await response(scope, receive, send)
