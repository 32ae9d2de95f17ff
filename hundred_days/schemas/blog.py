"""Pydantic schemas for blog posts."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from hundred_days.schemas.base import CamelModel, StoredDocument, require_text

MAX_TITLE_LENGTH = 200
MAX_EXCERPT_LENGTH = 300
MAX_AUTHOR_LENGTH = 100
EXCERPT_SOURCE_LENGTH = 200

_REQUIRED_MESSAGES: dict[str, str] = {
    "id": "ID is required",
    "title": "Title is required",
    "content": "Content is required",
    "excerpt": "Excerpt is required",
    "author": "Author is required",
}

_FIELD_LIMITS: dict[str, tuple[int, str]] = {
    "title": (MAX_TITLE_LENGTH, "Title cannot be more than 200 characters"),
    "author": (MAX_AUTHOR_LENGTH, "Author name cannot be more than 100 characters"),
}


def derive_excerpt(content: str) -> str:
    """First 200 characters of the content, with an ellipsis when truncated."""
    excerpt = content[:EXCERPT_SOURCE_LENGTH]
    if len(content) > EXCERPT_SOURCE_LENGTH:
        excerpt += "..."
    return excerpt


class BlogPost(StoredDocument):
    """A blog post as stored and returned by the API."""

    id: str
    title: str
    content: str
    excerpt: str
    author: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "title", "content", "author", mode="before")
    @classmethod
    def validate_text_fields(cls, value, info):
        limit, message = _FIELD_LIMITS.get(info.field_name, (None, None))
        return require_text(
            value,
            required_message=_REQUIRED_MESSAGES[info.field_name],
            max_length=limit,
            too_long_message=message,
        )

    @field_validator("excerpt", mode="before")
    @classmethod
    def validate_excerpt(cls, value):
        if value is None or value == "":
            raise ValueError(_REQUIRED_MESSAGES["excerpt"])
        if isinstance(value, str) and len(value) > MAX_EXCERPT_LENGTH:
            raise ValueError("Excerpt cannot be more than 300 characters")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def drop_missing_tags(cls, value):
        return [] if value is None else value


class BlogPostCreate(CamelModel):
    """Body of ``POST /api/blog``; required fields are checked by the service."""

    id: str | None = None
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    author: str | None = None
    tags: list[str] | None = None


class BlogPostUpdate(CamelModel):
    """Body of ``PUT /api/blog/{id}``."""

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
