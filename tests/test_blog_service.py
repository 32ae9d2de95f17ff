"""Tests for hundred_days/services/blog_service.py against an in-memory store."""

from __future__ import annotations

import asyncio

import pytest

from hundred_days.errors import DuplicateIdError, NotFoundError, ValidationError
from hundred_days.schemas.blog import BlogPostCreate, BlogPostUpdate
from hundred_days.services.blog_service import BlogPostService
from hundred_days.utils.locks import KeyedLock


def _create_body(**overrides) -> BlogPostCreate:
    data = {
        "id": "p1",
        "title": "Notes",
        "content": "Some content",
        "author": "Kim",
    }
    data.update(overrides)
    return BlogPostCreate.model_validate(data)


@pytest.fixture
def service(memory_store) -> BlogPostService:
    return BlogPostService(memory_store, locks=KeyedLock())


@pytest.mark.asyncio
async def test_create_stores_camel_case_document(service, memory_store):
    await service.create_post(_create_body(tags=["a"]))
    raw = await memory_store.blog_posts.find_one({"id": "p1"})
    assert raw["createdAt"] is not None
    assert raw["updatedAt"] is not None
    assert raw["excerpt"] == "Some content"
    assert raw["tags"] == ["a"]
    assert "created_at" not in raw


@pytest.mark.asyncio
async def test_create_requires_non_empty_fields(service):
    with pytest.raises(ValidationError, match="Title, content, and author"):
        await service.create_post(_create_body(content=""))


@pytest.mark.asyncio
async def test_duplicate_id_leaves_original(service):
    await service.create_post(_create_body(title="Keep me"))
    with pytest.raises(DuplicateIdError):
        await service.create_post(_create_body(title="Replace me"))
    post = await service.get_post("p1")
    assert post.title == "Keep me"


@pytest.mark.asyncio
async def test_list_caps_limit_when_configured(memory_store):
    service = BlogPostService(memory_store, max_page_size=2, locks=KeyedLock())
    for i in range(4):
        await service.create_post(_create_body(id=f"p{i}"))
    posts, meta = await service.list_posts(limit=50)
    assert len(posts) == 2
    assert meta == {"current": 1, "total": 2, "results": 2, "totalResults": 4}


@pytest.mark.asyncio
async def test_page_past_end_is_empty(service):
    await service.create_post(_create_body())
    posts, meta = await service.list_posts(page=5, limit=10)
    assert posts == []
    assert meta["results"] == 0
    assert meta["totalResults"] == 1


@pytest.mark.asyncio
async def test_update_keeps_created_at(service):
    await service.create_post(_create_body())
    stored = await service.get_post("p1")
    updated = await service.update_post("p1", BlogPostUpdate(title="New"))
    assert updated.created_at == stored.created_at
    assert updated.updated_at >= stored.updated_at


@pytest.mark.asyncio
async def test_update_missing_raises(service):
    with pytest.raises(NotFoundError):
        await service.update_post("ghost", BlogPostUpdate(title="x"))


@pytest.mark.asyncio
async def test_concurrent_updates_keep_both_fields(service):
    await service.create_post(_create_body())
    await asyncio.gather(
        service.update_post("p1", BlogPostUpdate(title="Concurrent title")),
        service.update_post("p1", BlogPostUpdate(tags=["merged"])),
    )
    post = await service.get_post("p1")
    assert post.title == "Concurrent title"
    assert post.tags == ["merged"]


@pytest.mark.asyncio
async def test_delete_then_get_raises(service):
    await service.create_post(_create_body())
    deleted = await service.delete_post("p1")
    assert deleted.id == "p1"
    with pytest.raises(NotFoundError, match="Blog post not found"):
        await service.get_post("p1")
