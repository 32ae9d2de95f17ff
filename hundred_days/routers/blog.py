"""Blog post endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from hundred_days.routers.dependencies import body_of, get_blog_service
from hundred_days.schemas.blog import BlogPostCreate, BlogPostUpdate
from hundred_days.schemas.envelope import envelope
from hundred_days.services.blog_service import BlogPostService
from hundred_days.services.queries import DEFAULT_SORT

router = APIRouter(prefix="/api/blog", tags=["blog"])


@router.get("", name="list_posts")
async def list_posts(
    search: str | None = Query(None),
    tag: str | None = Query(None),
    author: str | None = Query(None),
    sort: str = Query(DEFAULT_SORT),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    service: BlogPostService = Depends(get_blog_service),
) -> dict:
    """List posts with optional search/tag/author filters and pagination."""
    posts, pagination = await service.list_posts(
        search=search, tag=tag, author=author, sort=sort, page=page, limit=limit
    )
    return envelope([post.to_public() for post in posts], pagination=pagination)


@router.get("/{post_id}", name="get_post")
async def get_post(
    post_id: str, service: BlogPostService = Depends(get_blog_service)
) -> dict:
    post = await service.get_post(post_id)
    return envelope(post.to_public())


@router.post("", name="create_post", status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: BlogPostCreate = Depends(body_of(BlogPostCreate)),
    service: BlogPostService = Depends(get_blog_service),
) -> dict:
    post = await service.create_post(payload)
    return envelope(post.to_public(), message="Blog post created successfully")


@router.put("/{post_id}", name="update_post")
async def update_post(
    post_id: str,
    payload: BlogPostUpdate = Depends(body_of(BlogPostUpdate)),
    service: BlogPostService = Depends(get_blog_service),
) -> dict:
    post = await service.update_post(post_id, payload)
    return envelope(post.to_public(), message="Blog post updated successfully")


@router.delete("/{post_id}", name="delete_post")
async def delete_post(
    post_id: str, service: BlogPostService = Depends(get_blog_service)
) -> dict:
    post = await service.delete_post(post_id)
    return envelope(post.to_public(), message="Blog post deleted successfully")
