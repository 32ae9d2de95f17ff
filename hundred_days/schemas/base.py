"""Shared pydantic plumbing for stored documents and request bodies."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request bodies arrive with the same camelCase keys the store uses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class StoredDocument(CamelModel):
    """A record persisted in the document store.

    ``to_document`` produces the stored shape, ``to_public`` the JSON shape
    returned to clients (which also includes computed fields).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(
            by_alias=True, exclude=set(type(self).model_computed_fields)
        )

    def to_public(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_update(self, names: Iterable[str]) -> dict[str, Any]:
        """Stored values for the given field names, keyed as the store keys them."""
        stored = self.to_document()
        fields = type(self).model_fields
        keys = [fields[name].alias or name for name in names]
        return {key: stored[key] for key in keys}


def require_text(
    value: Any,
    *,
    required_message: str,
    max_length: int | None = None,
    too_long_message: str | None = None,
) -> Any:
    """Reject blank text and enforce an optional length bound on the trimmed value."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(required_message)
    if isinstance(value, str) and max_length is not None:
        if len(value.strip()) > max_length:
            raise ValueError(too_long_message)
    return value
