# src/campus_hub/api/v1/endpoints/comments.py
"""Comment endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.models import Comment, Post
from campus_hub.schemas.post import CommentCreate, CommentResponse, CommentWithAuthor
from campus_hub.services import comments as comment_service
from campus_hub.services.errors import CampusError, NotFoundError

router = APIRouter(tags=["comments"])


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    body: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Comment:
    """Comment on a post or reply to a comment."""
    comment = run_write(
        db,
        lambda: comment_service.create_comment(
            db, current_user, post_id, body.content, body.parent_comment_id
        ),
    )
    db.refresh(comment)
    return comment


@router.get("/posts/{post_id}/comments", response_model=list[CommentWithAuthor])
async def list_comments(post_id: int, db: SessionDep) -> list[dict[str, Any]]:
    if db.get(Post, post_id) is None:
        raise_http(NotFoundError("Post not found"))
    return comment_service.get_post_comments(db, post_id)


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, int]:
    """Delete one of your comments and every reply beneath it."""
    try:
        removed = comment_service.delete_comment(db, current_user, comment_id)
        db.commit()
    except CampusError as exc:
        db.rollback()
        raise_http(exc)
    return {"deleted": removed}
