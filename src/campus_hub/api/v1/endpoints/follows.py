# src/campus_hub/api/v1/endpoints/follows.py
"""Follow graph endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.schemas.user import FollowPage
from campus_hub.services import follows as follow_service

router = APIRouter(prefix="/users", tags=["follows"])


@router.post("/{user_id}/follow", status_code=status.HTTP_201_CREATED)
async def follow(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    """Follow another user."""
    run_write(db, lambda: follow_service.follow_user(db, current_user, user_id))
    return {"following": True}


@router.delete("/{user_id}/follow")
async def unfollow(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    """Stop following a user."""
    run_write(db, lambda: follow_service.unfollow_user(db, current_user, user_id))
    return {"following": False}


@router.get("/{user_id}/is-following")
async def is_following(
    user_id: int, current_user: CurrentUserDep, db: SessionDep
) -> dict[str, bool]:
    return {"following": follow_service.is_following(db, current_user.id, user_id)}


@router.get("/{user_id}/followers", response_model=FollowPage)
async def followers(
    user_id: int,
    db: SessionDep,
    limit: int = Query(default=follow_service.DEFAULT_PAGE_SIZE, ge=1, le=200),
    cursor: int | None = None,
) -> dict[str, Any]:
    return follow_service.get_followers(db, user_id, limit, cursor)


@router.get("/{user_id}/following", response_model=FollowPage)
async def following(
    user_id: int,
    db: SessionDep,
    limit: int = Query(default=follow_service.DEFAULT_PAGE_SIZE, ge=1, le=200),
    cursor: int | None = None,
) -> dict[str, Any]:
    return follow_service.get_following(db, user_id, limit, cursor)
