"""Challenge service layer, including per-day completion toggling."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError

from hundred_days.database import DocumentStore
from hundred_days.errors import (
    DuplicateIdError,
    NotFoundError,
    ValidationError,
    from_pydantic,
)
from hundred_days.schemas.challenge import (
    TOTAL_DAYS,
    Challenge,
    ChallengeCreate,
    ChallengeUpdate,
    blank_days,
)
from hundred_days.services.queries import build_challenge_filter, parse_sort
from hundred_days.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Challenge not found"
DAY_RANGE_MESSAGE = f"Day must be between 1 and {TOTAL_DAYS}"
HIDE_INTERNAL_ID = {"_id": 0}
DAY_PATTERN = re.compile(r"[0-9]+")

challenge_locks = KeyedLock()


def _validated(data: dict[str, Any]) -> Challenge:
    try:
        return Challenge.model_validate(data)
    except PydanticValidationError as exc:
        raise from_pydantic(exc) from exc


def parse_day(raw: str | int) -> int:
    """Parse a 1-based day number, rejecting anything outside 1..100.

    Only plain ASCII digits are accepted, so ``"1_0"`` or ``" 5"`` are errors
    rather than whatever ``int()`` would make of them.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        day = raw
    elif isinstance(raw, str) and DAY_PATTERN.fullmatch(raw):
        day = int(raw)
    else:
        raise ValidationError(DAY_RANGE_MESSAGE)
    if not 1 <= day <= TOTAL_DAYS:
        raise ValidationError(DAY_RANGE_MESSAGE)
    return day


class ChallengeService:
    """CRUD and day toggling for challenges in the ``challenges`` collection."""

    def __init__(
        self, store: DocumentStore, *, locks: KeyedLock = challenge_locks
    ) -> None:
        self.collection = store.challenges
        self.locks = locks

    async def list_challenges(
        self,
        *,
        status: str | None = None,
        author: str | None = None,
        sort: str | None = None,
    ) -> list[Challenge]:
        query = build_challenge_filter(status=status, author=author)
        cursor = self.collection.find(query, HIDE_INTERNAL_ID).sort(parse_sort(sort))
        documents = await cursor.to_list(length=None)
        return [Challenge.model_validate(doc) for doc in documents]

    async def get_challenge(self, challenge_id: str) -> Challenge:
        document = await self.collection.find_one(
            {"id": challenge_id}, HIDE_INTERNAL_ID
        )
        if document is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return Challenge.model_validate(document)

    async def create_challenge(self, payload: ChallengeCreate) -> Challenge:
        """Create a fresh challenge; progress fields always start from zero."""
        if not (payload.title and payload.description and payload.author):
            raise ValidationError("Title, description, and author are required")

        now = datetime.now(UTC)
        challenge = _validated(
            {
                "id": payload.id,
                "title": payload.title,
                "description": payload.description,
                "author": payload.author,
                "start_date": payload.start_date or now,
                "current_day": 0,
                "completed_days": blank_days(),
                "is_active": True,
                "created_at": now,
            }
        )
        try:
            await self.collection.insert_one(challenge.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateIdError("Challenge with this ID already exists") from exc

        logger.info("Created challenge id=%s", challenge.id)
        return challenge

    async def update_challenge(
        self, challenge_id: str, payload: ChallengeUpdate
    ) -> Challenge:
        sent = payload.model_fields_set
        changes: dict[str, Any] = {}
        if payload.title:
            changes["title"] = payload.title
        if payload.description:
            changes["description"] = payload.description
        if "current_day" in sent:
            changes["current_day"] = payload.current_day
        if payload.completed_days is not None:
            changes["completed_days"] = payload.completed_days
        if "is_active" in sent:
            changes["is_active"] = payload.is_active

        async with self.locks.hold(challenge_id):
            current = await self.get_challenge(challenge_id)
            if not changes:
                return current
            challenge = _validated({**current.model_dump(), **changes})
            await self._save(challenge, changes)
        return challenge

    async def delete_challenge(self, challenge_id: str) -> Challenge:
        document = await self.collection.find_one_and_delete(
            {"id": challenge_id}, projection=HIDE_INTERNAL_ID
        )
        if document is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Deleted challenge id=%s", challenge_id)
        return Challenge.model_validate(document)

    async def toggle_day(self, challenge_id: str, raw_day: str | int) -> Challenge:
        """Flip completion of one day and advance ``currentDay`` if needed."""
        day = parse_day(raw_day)
        async with self.locks.hold(challenge_id):
            challenge = await self.get_challenge(challenge_id)
            challenge.toggle_day(day)
            await self._save(challenge, ("completed_days", "current_day"))

        logger.info(
            "Toggled day=%s challenge id=%s completed=%s current_day=%s",
            day,
            challenge_id,
            challenge.completed_days[day - 1],
            challenge.current_day,
        )
        return challenge

    async def _save(self, challenge: Challenge, names) -> None:
        result = await self.collection.update_one(
            {"id": challenge.id}, {"$set": challenge.to_update(names)}
        )
        if result.matched_count == 0:
            raise NotFoundError(NOT_FOUND_MESSAGE)
