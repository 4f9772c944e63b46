"""Bookmarks organised into named collections."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_hub.models import Bookmark, Post, User
from campus_hub.models.repost import DEFAULT_COLLECTION
from campus_hub.services.errors import NotFoundError, ValidationError

COLLECTION_NAME_MAX_LENGTH = 100
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def add_bookmark(
    db: Session, user: User, post_id: int, collection_name: str | None = None
) -> dict[str, Any]:
    """Bookmark a post, or move an existing bookmark to another collection.

    Returns a dict whose ``status`` is ``"created"``, ``"updated"`` or
    ``"already-exists"``.
    """
    name = (collection_name or DEFAULT_COLLECTION).strip() or DEFAULT_COLLECTION
    if len(name) > COLLECTION_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Collection name must not exceed {COLLECTION_NAME_MAX_LENGTH} characters"
        )
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post not found")

    existing = (
        db.query(Bookmark).filter(Bookmark.user_id == user.id, Bookmark.post_id == post_id).first()
    )
    if existing is not None:
        if existing.collection_name == name:
            return {"status": "already-exists", "bookmark": existing}
        existing.collection_name = name
        return {"status": "updated", "bookmark": existing}

    bookmark = Bookmark(user_id=user.id, post_id=post_id, collection_name=name)
    db.add(bookmark)
    db.flush()
    return {"status": "created", "bookmark": bookmark}


def remove_bookmark(db: Session, user: User, post_id: int) -> None:
    """Remove the user's bookmark of a post."""
    bookmark = (
        db.query(Bookmark).filter(Bookmark.user_id == user.id, Bookmark.post_id == post_id).first()
    )
    if bookmark is None:
        raise NotFoundError("Bookmark not found")
    db.delete(bookmark)


def get_bookmarks(
    db: Session,
    user: User,
    collection_name: str | None = None,
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: str | None = None,
) -> dict[str, Any]:
    """Return bookmarked posts, newest bookmark first.

    ``cursor`` is the offset returned as ``next_cursor``; bookmarks of
    deleted posts are skipped by the join.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = int(cursor) if cursor and cursor.isdigit() else 0

    query = (
        db.query(Bookmark, Post)
        .join(Post, Post.id == Bookmark.post_id)
        .filter(Bookmark.user_id == user.id)
    )
    if collection_name:
        query = query.filter(Bookmark.collection_name == collection_name)
    rows = query.order_by(Bookmark.id.desc()).offset(offset).limit(limit + 1).all()

    has_more = len(rows) > limit
    rows = rows[:limit]
    return {
        "items": [{"bookmark": bookmark, "post": post} for bookmark, post in rows],
        "has_more": has_more,
        "next_cursor": str(offset + limit) if has_more else None,
    }


def get_collections(db: Session, user: User) -> list[dict[str, Any]]:
    """Return the user's collection names with bookmark counts."""
    rows = (
        db.query(Bookmark.collection_name, func.count(Bookmark.id))
        .filter(Bookmark.user_id == user.id)
        .group_by(Bookmark.collection_name)
        .order_by(Bookmark.collection_name)
        .all()
    )
    return [{"name": name, "count": count} for name, count in rows]


def is_bookmarked(db: Session, user: User, post_id: int) -> bool:
    """Return True if the user has bookmarked the post."""
    return (
        db.query(Bookmark.id)
        .filter(Bookmark.user_id == user.id, Bookmark.post_id == post_id)
        .first()
        is not None
    )
