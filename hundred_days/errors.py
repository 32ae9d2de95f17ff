"""Exception hierarchy mapped onto the JSON error envelope."""

from __future__ import annotations

from fastapi import status
from pydantic import ValidationError as PydanticValidationError


class AppError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Missing or invalid fields, malformed day numbers."""

    code = "validation_error"


class DuplicateIdError(AppError):
    """A record with the same logical id already exists."""

    code = "duplicate_id"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class CorsRejectedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "cors_rejected"


def describe_validation_errors(errors: list[dict]) -> str:
    """Join pydantic error entries into one human readable message.

    Custom validators raise ``ValueError`` with the final wording, which
    pydantic keeps under ``ctx["error"]``; built-in errors fall back to the
    field location plus pydantic's own message.
    """
    messages: list[str] = []
    for error in errors:
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            message = str(ctx_error)
        else:
            location = ".".join(
                str(part) for part in error.get("loc", ()) if part != "body"
            )
            message = f"{location}: {error['msg']}" if location else error["msg"]
        if message not in messages:
            messages.append(message)
    return ", ".join(messages)


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    return ValidationError(describe_validation_errors(exc.errors()))
