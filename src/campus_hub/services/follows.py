"""Follow graph mutations and queries."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campus_hub.models import Follow, User
from campus_hub.services import counters, gamification, notifications
from campus_hub.services.errors import ConflictError, NotFoundError, ValidationError
from campus_hub.services.scheduler import run_after

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def follow_user(db: Session, follower: User, target_user_id: int) -> Follow:
    """Create a follow edge and schedule the counter and notification jobs.

    Raises:
        ValidationError: On a self-follow.
        NotFoundError: If the target user does not exist.
        ConflictError: If the edge already exists.
    """
    if follower.id == target_user_id:
        raise ValidationError("Cannot follow yourself")
    if db.get(User, target_user_id) is None:
        raise NotFoundError("Target user not found")

    if is_following(db, follower.id, target_user_id):
        raise ConflictError("Already following this user")

    follow = Follow(follower_id=follower.id, following_id=target_user_id)
    db.add(follow)
    db.flush()

    run_after(db, 0, counters.update_user_follow_counts, user_id=target_user_id, follower_delta=1)
    run_after(db, 0, counters.update_user_follow_counts, user_id=follower.id, following_delta=1)
    run_after(
        db,
        0,
        notifications.create_notification,
        recipient_id=target_user_id,
        actor_id=follower.id,
        type="follow",
        reference_id=str(follower.id),
        message=f"{follower.name} started following you",
    )
    run_after(db, 0, gamification.check_achievements, user_id=follower.id)
    return follow


def unfollow_user(db: Session, follower: User, target_user_id: int) -> None:
    """Remove a follow edge and schedule the matching counter decrements."""
    follow = (
        db.query(Follow)
        .filter(Follow.follower_id == follower.id, Follow.following_id == target_user_id)
        .first()
    )
    if follow is None:
        raise NotFoundError("Not following this user")

    db.delete(follow)
    run_after(db, 0, counters.update_user_follow_counts, user_id=target_user_id, follower_delta=-1)
    run_after(db, 0, counters.update_user_follow_counts, user_id=follower.id, following_delta=-1)


def is_following(db: Session, follower_id: int, target_user_id: int) -> bool:
    """Return True if ``follower_id`` follows ``target_user_id``."""
    return (
        db.query(Follow.id)
        .filter(Follow.follower_id == follower_id, Follow.following_id == target_user_id)
        .first()
        is not None
    )


def _page(
    db: Session,
    user_id: int,
    *,
    followers: bool,
    limit: int,
    cursor: int | None,
) -> dict[str, Any]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    own_column = Follow.following_id if followers else Follow.follower_id
    other_column = Follow.follower_id if followers else Follow.following_id

    query = db.query(Follow, User).join(User, User.id == other_column).filter(own_column == user_id)
    if cursor is not None:
        query = query.filter(Follow.id < cursor)
    rows = query.order_by(Follow.id.desc()).limit(limit + 1).all()

    has_more = len(rows) > limit
    rows = rows[:limit]
    return {
        "users": [user for _follow, user in rows],
        "has_more": has_more,
        "next_cursor": rows[-1][0].id if has_more else None,
    }


def get_followers(
    db: Session, user_id: int, limit: int = DEFAULT_PAGE_SIZE, cursor: int | None = None
) -> dict[str, Any]:
    """Return users following ``user_id``, newest edge first."""
    return _page(db, user_id, followers=True, limit=limit, cursor=cursor)


def get_following(
    db: Session, user_id: int, limit: int = DEFAULT_PAGE_SIZE, cursor: int | None = None
) -> dict[str, Any]:
    """Return users that ``user_id`` follows, newest edge first."""
    return _page(db, user_id, followers=False, limit=limit, cursor=cursor)
