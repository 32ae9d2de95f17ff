"""The ``{success, data|message}`` wrapper returned by every endpoint."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from hundred_days.errors import AppError


def envelope(
    data: Any = None,
    *,
    message: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def error_body(message: str) -> dict[str, Any]:
    return {"success": False, "message": message}


def error_response(exc: AppError, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        error_body(exc.message), status_code=exc.status_code, headers=headers
    )
