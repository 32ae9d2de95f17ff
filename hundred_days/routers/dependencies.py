"""FastAPI dependencies wiring services and request bodies."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from types import UnionType
from typing import Any, TypeVar, Union, get_args, get_origin

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData

from hundred_days.config import settings
from hundred_days.database import DocumentStore, get_store
from hundred_days.services.blog_service import BlogPostService
from hundred_days.services.challenge_service import ChallengeService

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Body = TypeVar("Body", bound=BaseModel)


def get_blog_service(store: DocumentStore = Depends(get_store)) -> BlogPostService:
    return BlogPostService(store, max_page_size=settings.max_page_size)


def get_challenge_service(
    store: DocumentStore = Depends(get_store),
) -> ChallengeService:
    return ChallengeService(store)


def _is_list_field(annotation: Any) -> bool:
    if get_origin(annotation) in (Union, UnionType):
        return any(_is_list_field(arg) for arg in get_args(annotation))
    return get_origin(annotation) is list or annotation is list


def form_to_dict(form: FormData, model: type[BaseModel]) -> dict[str, Any]:
    """Flatten submitted form fields into the shape a JSON body would have.

    ``tags[]=a&tags[]=b`` and ``tags=a&tags=b`` both become a list; list
    fields sent once still become a one-item list.
    """
    list_keys = set()
    for name, field in model.model_fields.items():
        if _is_list_field(field.annotation):
            list_keys.update({name, field.alias or name})

    data: dict[str, Any] = {}
    for raw_key in dict.fromkeys(form.keys()):
        key = raw_key[:-2] if raw_key.endswith("[]") else raw_key
        values = [value for value in form.getlist(raw_key) if isinstance(value, str)]
        if key in list_keys or raw_key != key or len(values) > 1:
            data.setdefault(key, []).extend(values)
        elif values:
            data[key] = values[0]
    return data


def body_of(model: type[Body]) -> Callable[[Request], Awaitable[Body]]:
    """Dependency parsing a JSON or url-encoded form body into ``model``.

    An empty body yields ``model()`` so required-field checks stay with the
    service and produce its messages.
    """

    async def parse(request: Request) -> Body:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPE):
            data: Any = form_to_dict(await request.form(), model)
        else:
            raw = await request.body()
            if not raw.strip():
                return model()
            try:
                data = json.loads(raw)
            except ValueError:
                error = {
                    "type": "json_invalid",
                    "loc": ("body",),
                    "msg": "JSON decode error",
                }
                raise RequestValidationError([error]) from None
        if data is None:
            return model()
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False)) from exc

    return parse
