# src/campus_hub/api/v1/endpoints/posts.py
"""Post endpoints for the Campus Hub API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.models import Post
from campus_hub.schemas.post import PostCreate, PostDeleted, PostPage, PostResponse, PostWithAuthor
from campus_hub.services import posts as post_service
from campus_hub.services.errors import CampusError

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Create a post; followers' feeds are filled in the background."""
    post = run_write(
        db,
        lambda: post_service.create_post(
            db, current_user, post_data.content, post_data.community_id
        ),
    )
    db.refresh(post)
    return post


@router.get("/", response_model=PostPage)
async def list_posts(
    db: SessionDep,
    limit: int = Query(default=post_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: int | None = None,
    community_id: int | None = None,
) -> dict[str, Any]:
    """List the newest posts, optionally within a community."""
    return post_service.list_recent_posts(db, limit, cursor, community_id)


@router.get("/by-user/{user_id}", response_model=PostPage)
async def list_user_posts(
    user_id: int,
    db: SessionDep,
    limit: int = Query(default=post_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: int | None = None,
) -> dict[str, Any]:
    return post_service.list_user_posts(db, user_id, limit, cursor)


@router.get("/{post_id}", response_model=PostWithAuthor)
async def get_post(post_id: int, db: SessionDep) -> dict[str, Any]:
    """Get a specific post by ID."""
    try:
        return post_service.get_post(db, post_id)
    except CampusError as exc:
        raise_http(exc)


@router.delete("/{post_id}", response_model=PostDeleted)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, int]:
    """Delete one of your posts along with its comments, reactions and shares."""
    return run_write(db, lambda: post_service.delete_post(db, current_user, post_id))
