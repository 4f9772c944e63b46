# src/campus_hub/api/v1/endpoints/feed.py
"""Home feed endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep
from campus_hub.schemas.post import PostPage
from campus_hub.services import feed as feed_service

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/", response_model=PostPage)
async def get_feed(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(default=feed_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: int | None = None,
) -> dict[str, Any]:
    """Return the caller's materialized feed, newest first."""
    return feed_service.get_feed(db, current_user, limit, cursor)
