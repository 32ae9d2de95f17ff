"""Pydantic schemas for 100-day challenges."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field, computed_field, field_validator

from hundred_days.schemas.base import CamelModel, StoredDocument, require_text

TOTAL_DAYS = 100
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_AUTHOR_LENGTH = 100

_REQUIRED_MESSAGES: dict[str, str] = {
    "id": "ID is required",
    "title": "Title is required",
    "description": "Description is required",
    "author": "Author is required",
}

_FIELD_LIMITS: dict[str, tuple[int, str]] = {
    "title": (MAX_TITLE_LENGTH, "Title cannot be more than 200 characters"),
    "description": (
        MAX_DESCRIPTION_LENGTH,
        "Description cannot be more than 1000 characters",
    ),
    "author": (MAX_AUTHOR_LENGTH, "Author name cannot be more than 100 characters"),
}


class ChallengeStatus(str, Enum):
    """List filter over a challenge's progress and pause flag."""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


def blank_days() -> list[bool]:
    return [False] * TOTAL_DAYS


class Challenge(StoredDocument):
    """A 100-day challenge.

    ``current_day`` is the highest day reached; ``completed_days`` is an
    independent completion flag per day (index 0 is day 1). ``is_active``
    is a pause flag and is not cleared when day 100 is reached.
    """

    id: str
    title: str
    description: str
    author: str
    start_date: datetime
    current_day: int = 0
    completed_days: list[bool] = Field(default_factory=blank_days)
    is_active: bool = True
    created_at: datetime

    @field_validator("id", "title", "description", "author", mode="before")
    @classmethod
    def validate_text_fields(cls, value, info):
        limit, message = _FIELD_LIMITS.get(info.field_name, (None, None))
        return require_text(
            value,
            required_message=_REQUIRED_MESSAGES[info.field_name],
            max_length=limit,
            too_long_message=message,
        )

    @field_validator("current_day")
    @classmethod
    def validate_current_day(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Current day cannot be negative")
        if value > TOTAL_DAYS:
            raise ValueError("Current day cannot exceed 100")
        return value

    @field_validator("completed_days")
    @classmethod
    def validate_completed_days(cls, value: list[bool]) -> list[bool]:
        if len(value) != TOTAL_DAYS:
            raise ValueError("Completed days must contain exactly 100 entries")
        return value

    @computed_field(alias="progress")
    @property
    def progress(self) -> int:
        return self.current_day

    @computed_field(alias="completedCount")
    @property
    def completed_count(self) -> int:
        return sum(1 for done in self.completed_days if done)

    @computed_field(alias="daysRemaining")
    @property
    def days_remaining(self) -> int:
        return TOTAL_DAYS - self.current_day

    def toggle_day(self, day: int) -> None:
        """Flip completion of 1-based ``day``; ``current_day`` never decreases."""
        index = day - 1
        self.completed_days[index] = not self.completed_days[index]
        self.current_day = max(self.current_day, day)


class ChallengeCreate(CamelModel):
    """Body of ``POST /api/challenges``; progress fields are ignored on create."""

    id: str | None = None
    title: str | None = None
    description: str | None = None
    author: str | None = None
    start_date: datetime | None = None


class ChallengeUpdate(CamelModel):
    """Body of ``PUT /api/challenges/{id}``.

    ``current_day`` and ``is_active`` are applied whenever the key is sent,
    so ``0`` and ``false`` count. ``title`` and ``description`` are only
    applied when non-empty.
    """

    title: str | None = None
    description: str | None = None
    current_day: int | None = None
    completed_days: list[bool] | None = None
    is_active: bool | None = None
