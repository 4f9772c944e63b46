# src/campus_hub/api/v1/endpoints/bookmarks.py
"""Bookmark endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.schemas.engagement import (
    BookmarkCreate,
    BookmarkPage,
    BookmarkResult,
    CollectionSummary,
)
from campus_hub.services import bookmarks as bookmark_service

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.put("/{post_id}", response_model=BookmarkResult)
async def add_bookmark(
    post_id: int,
    body: BookmarkCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Bookmark a post or move it to another collection."""
    result = run_write(
        db,
        lambda: bookmark_service.add_bookmark(db, current_user, post_id, body.collection_name),
    )
    db.refresh(result["bookmark"])
    return result


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bookmark(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    run_write(db, lambda: bookmark_service.remove_bookmark(db, current_user, post_id))


@router.get("/", response_model=BookmarkPage)
async def list_bookmarks(
    current_user: CurrentUserDep,
    db: SessionDep,
    collection: str | None = None,
    limit: int = Query(default=bookmark_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: str | None = None,
) -> dict[str, Any]:
    return bookmark_service.get_bookmarks(db, current_user, collection, limit, cursor)


@router.get("/collections", response_model=list[CollectionSummary])
async def list_collections(current_user: CurrentUserDep, db: SessionDep) -> list[dict[str, Any]]:
    return bookmark_service.get_collections(db, current_user)


@router.get("/{post_id}/status")
async def bookmark_status(
    post_id: int, current_user: CurrentUserDep, db: SessionDep
) -> dict[str, bool]:
    return {"bookmarked": bookmark_service.is_bookmarked(db, current_user, post_id)}
