"""Reposts and quote reposts."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campus_hub.models import Post, Repost, User
from campus_hub.services import counters
from campus_hub.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from campus_hub.services.scheduler import run_after

QUOTE_MAX_LENGTH = 500
USER_REPOSTS_LIMIT = 50


def create_repost(
    db: Session, user: User, post_id: int, quote_content: str | None = None
) -> Repost:
    """Repost someone else's post and schedule the share counter increment.

    Raises:
        NotFoundError: If the post does not exist.
        ValidationError: For own posts or an empty or too long quote.
        ConflictError: If the user already reposted this post.
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Original post not found")
    if post.author_id == user.id:
        raise ValidationError("Cannot repost your own post")

    existing = (
        db.query(Repost)
        .filter(Repost.user_id == user.id, Repost.original_post_id == post_id)
        .first()
    )
    if existing is not None:
        raise ConflictError("You have already reposted this post")

    if quote_content is not None:
        if not quote_content.strip():
            raise ValidationError("Quote content cannot be empty")
        if len(quote_content) > QUOTE_MAX_LENGTH:
            raise ValidationError(
                f"Quote content must not exceed {QUOTE_MAX_LENGTH} characters"
            )

    repost = Repost(user_id=user.id, original_post_id=post_id, quote_content=quote_content)
    db.add(repost)
    db.flush()
    run_after(db, 0, counters.increment_post_counts, post_id=post_id, share_count=1)
    return repost


def delete_repost(db: Session, user: User, repost_id: int) -> None:
    """Delete one of the user's reposts and schedule the share counter decrement."""
    repost = db.get(Repost, repost_id)
    if repost is None:
        raise NotFoundError("Repost not found")
    if repost.user_id != user.id:
        raise AuthorizationError("You can only delete your own reposts")

    db.delete(repost)
    run_after(
        db, 0, counters.decrement_post_counts, post_id=repost.original_post_id, share_count=1
    )


def get_reposts(db: Session, post_id: int, limit: int = 20) -> list[dict[str, Any]]:
    """Return who reposted a post, newest first."""
    rows = (
        db.query(Repost, User)
        .join(User, User.id == Repost.user_id)
        .filter(Repost.original_post_id == post_id)
        .order_by(Repost.id.desc())
        .limit(limit)
        .all()
    )
    return [{"repost": repost, "user": user} for repost, user in rows]


def has_user_reposted(db: Session, user: User, post_id: int) -> bool:
    """Return True if the user has reposted the post."""
    return (
        db.query(Repost.id)
        .filter(Repost.user_id == user.id, Repost.original_post_id == post_id)
        .first()
        is not None
    )


def get_user_reposts(
    db: Session, user_id: int, limit: int = USER_REPOSTS_LIMIT
) -> list[dict[str, Any]]:
    """Return a user's reposts with the original posts, skipping deleted ones."""
    rows = (
        db.query(Repost, Post)
        .join(Post, Post.id == Repost.original_post_id)
        .filter(Repost.user_id == user_id)
        .order_by(Repost.id.desc())
        .limit(limit)
        .all()
    )
    return [{"repost": repost, "post": post} for repost, post in rows]
