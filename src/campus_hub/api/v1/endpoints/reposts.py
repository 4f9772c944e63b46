# src/campus_hub/api/v1/endpoints/reposts.py
"""Repost endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Repost
from campus_hub.schemas.engagement import RepostCreate, RepostResponse
from campus_hub.schemas.post import PostResponse
from campus_hub.schemas.user import UserSummary
from campus_hub.services import reposts as repost_service

router = APIRouter(tags=["reposts"])


@router.post(
    "/posts/{post_id}/reposts",
    response_model=RepostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_repost(
    post_id: int,
    body: RepostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Repost:
    """Share someone else's post, optionally with a quote."""
    repost = run_write(
        db, lambda: repost_service.create_repost(db, current_user, post_id, body.quote_content)
    )
    db.refresh(repost)
    return repost


@router.delete("/reposts/{repost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_repost(repost_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    run_write(db, lambda: repost_service.delete_repost(db, current_user, repost_id))


@router.get("/posts/{post_id}/reposts")
async def list_reposts(post_id: int, db: SessionDep) -> list[dict[str, Any]]:
    rows = repost_service.get_reposts(db, post_id)
    return [
        {
            "repost": RepostResponse.model_validate(row["repost"]),
            "user": UserSummary.model_validate(row["user"]),
        }
        for row in rows
    ]


@router.get("/users/{user_id}/reposts")
async def list_user_reposts(user_id: int, db: SessionDep) -> list[dict[str, Any]]:
    rows = repost_service.get_user_reposts(db, user_id)
    return [
        {
            "repost": RepostResponse.model_validate(row["repost"]),
            "post": PostResponse.model_validate(row["post"]),
        }
        for row in rows
    ]


@router.get("/posts/{post_id}/reposted")
async def has_reposted(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    return {"reposted": repost_service.has_user_reposted(db, current_user, post_id)}
