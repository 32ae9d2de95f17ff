"""Blog post service layer."""

from __future__ import annotations

import logging
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
from hundred_days.schemas.blog import (
    BlogPost,
    BlogPostCreate,
    BlogPostUpdate,
    derive_excerpt,
)
from hundred_days.services.queries import (
    build_post_filter,
    page_window,
    pagination_meta,
    parse_sort,
)
from hundred_days.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Blog post not found"
HIDE_INTERNAL_ID = {"_id": 0}

post_locks = KeyedLock()


def _validated(data: dict[str, Any]) -> BlogPost:
    try:
        return BlogPost.model_validate(data)
    except PydanticValidationError as exc:
        raise from_pydantic(exc) from exc


class BlogPostService:
    """CRUD operations for blog posts backed by the ``blogposts`` collection."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        max_page_size: int | None = None,
        locks: KeyedLock = post_locks,
    ) -> None:
        self.collection = store.blog_posts
        self.max_page_size = max_page_size
        self.locks = locks

    async def list_posts(
        self,
        *,
        search: str | None = None,
        tag: str | None = None,
        author: str | None = None,
        sort: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[BlogPost], dict]:
        """Return one page of matching posts plus pagination metadata."""
        if self.max_page_size is not None:
            limit = min(limit, self.max_page_size)
        query = build_post_filter(search=search, tag=tag, author=author)
        skip, limit = page_window(page, limit)

        cursor = (
            self.collection.find(query, HIDE_INTERNAL_ID)
            .sort(parse_sort(sort))
            .skip(skip)
            .limit(limit)
        )
        documents = await cursor.to_list(length=None)
        total = await self.collection.count_documents(query)

        posts = [BlogPost.model_validate(doc) for doc in documents]
        meta = pagination_meta(
            page=page, limit=limit, returned=len(posts), total=total
        )
        return posts, meta

    async def get_post(self, post_id: str) -> BlogPost:
        document = await self.collection.find_one({"id": post_id}, HIDE_INTERNAL_ID)
        if document is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return BlogPost.model_validate(document)

    async def create_post(self, payload: BlogPostCreate) -> BlogPost:
        if not (payload.title and payload.content and payload.author):
            raise ValidationError("Title, content, and author are required")

        now = datetime.now(UTC)
        post = _validated(
            {
                "id": payload.id,
                "title": payload.title,
                "content": payload.content,
                "excerpt": payload.excerpt or derive_excerpt(payload.content),
                "author": payload.author,
                "tags": payload.tags or [],
                "created_at": now,
                "updated_at": now,
            }
        )
        try:
            await self.collection.insert_one(post.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateIdError("Blog post with this ID already exists") from exc

        logger.info("Created blog post id=%s", post.id)
        return post

    async def update_post(self, post_id: str, payload: BlogPostUpdate) -> BlogPost:
        """Apply non-empty title/content and any supplied tags; refresh updatedAt."""
        changes: dict[str, Any] = {}
        if payload.title:
            changes["title"] = payload.title
        if payload.content:
            changes["content"] = payload.content
            changes["excerpt"] = derive_excerpt(payload.content)
        if payload.tags is not None:
            changes["tags"] = payload.tags
        changes["updated_at"] = datetime.now(UTC)

        async with self.locks.hold(post_id):
            current = await self.get_post(post_id)
            post = _validated({**current.model_dump(), **changes})
            result = await self.collection.update_one(
                {"id": post_id}, {"$set": post.to_update(changes)}
            )
            if result.matched_count == 0:
                raise NotFoundError(NOT_FOUND_MESSAGE)
        return post

    async def delete_post(self, post_id: str) -> BlogPost:
        document = await self.collection.find_one_and_delete(
            {"id": post_id}, projection=HIDE_INTERNAL_ID
        )
        if document is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        logger.info("Deleted blog post id=%s", post_id)
        return BlogPost.model_validate(document)
