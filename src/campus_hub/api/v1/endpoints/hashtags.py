# src/campus_hub/api/v1/endpoints/hashtags.py
"""Hashtag endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from campus_hub.api.v1.dependencies import SessionDep
from campus_hub.schemas.post import HashtagPostPage, HashtagResponse
from campus_hub.services import hashtags as hashtag_service

router = APIRouter(prefix="/hashtags", tags=["hashtags"])


@router.get("/trending", response_model=list[HashtagResponse])
async def trending(
    db: SessionDep, limit: int = Query(default=10, ge=1, le=50)
) -> list[dict[str, Any]]:
    """Most used hashtags of the last day."""
    return hashtag_service.get_trending(db, limit)


@router.get("/search", response_model=list[HashtagResponse])
async def search(
    db: SessionDep, q: str = Query(..., min_length=1), limit: int = Query(default=5, ge=1, le=50)
) -> list[dict[str, Any]]:
    return hashtag_service.search_hashtags(db, q, limit)


@router.get("/{tag}", response_model=HashtagResponse)
async def hashtag_stats(tag: str, db: SessionDep) -> dict[str, Any]:
    stats = hashtag_service.get_hashtag_stats(db, tag)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hashtag not found")
    return stats


@router.get("/{tag}/posts", response_model=HashtagPostPage)
async def hashtag_posts(
    tag: str,
    db: SessionDep,
    limit: int = Query(default=hashtag_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    cursor: int | None = None,
) -> dict[str, Any]:
    """Posts carrying a hashtag, newest first."""
    return hashtag_service.get_posts_by_hashtag(db, tag, limit, cursor)
