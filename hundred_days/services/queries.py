"""Filter and sort construction for list endpoints."""

from __future__ import annotations

import math
import re
from typing import Any

from pymongo import ASCENDING, DESCENDING

from hundred_days.schemas.challenge import TOTAL_DAYS, ChallengeStatus

DEFAULT_SORT = "-createdAt"


def contains(text: str) -> dict[str, str]:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(text), "$options": "i"}


def parse_sort(sort: str | None) -> list[tuple[str, int]]:
    """Translate ``"-createdAt title"`` into a pymongo sort specification.

    Fields are separated by spaces or commas; a leading ``-`` sorts
    descending, a leading ``+`` is accepted and ignored. Equal keys fall
    back to ``_id`` in the direction of the first field.
    """
    spec: list[tuple[str, int]] = []
    for token in re.split(r"[\s,]+", (sort or "").strip()):
        if not token:
            continue
        direction = ASCENDING
        if token[0] == "-":
            direction = DESCENDING
            token = token[1:]
        elif token[0] == "+":
            token = token[1:]
        if token and not token.startswith("$"):
            spec.append((token, direction))
    if not spec:
        return parse_sort(DEFAULT_SORT)
    if all(field != "_id" for field, _ in spec):
        # Insertion order breaks ties so paging stays stable
        spec.append(("_id", spec[0][1]))
    return spec


def build_post_filter(
    *,
    search: str | None = None,
    tag: str | None = None,
    author: str | None = None,
) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if search:
        query["$or"] = [
            {"title": contains(search)},
            {"content": contains(search)},
            {"author": contains(search)},
        ]
    if tag:
        query["tags"] = {"$in": [tag]}
    if author:
        query["author"] = contains(author)
    return query


def build_challenge_filter(
    *,
    status: str | None = None,
    author: str | None = None,
) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if status:
        try:
            status_enum = ChallengeStatus(status.lower())
        except ValueError:
            status_enum = None  # Unknown status, ignore filter
        if status_enum is ChallengeStatus.ACTIVE:
            query["isActive"] = True
            query["currentDay"] = {"$lt": TOTAL_DAYS}
        elif status_enum is ChallengeStatus.COMPLETED:
            query["currentDay"] = {"$gte": TOTAL_DAYS}
        elif status_enum is ChallengeStatus.PAUSED:
            query["isActive"] = False
            query["currentDay"] = {"$lt": TOTAL_DAYS}
    if author:
        query["author"] = contains(author)
    return query


def page_window(page: int, limit: int) -> tuple[int, int]:
    """Return ``(skip, limit)`` for a 1-based page."""
    return (page - 1) * limit, limit


def pagination_meta(*, page: int, limit: int, returned: int, total: int) -> dict:
    return {
        "current": page,
        "total": math.ceil(total / limit),
        "results": returned,
        "totalResults": total,
    }
