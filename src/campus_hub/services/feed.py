"""Fan-out-on-write home feed."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from campus_hub.core.settings import settings
from campus_hub.models import Follow, Post, User, UserFeed
from campus_hub.services.scheduler import SessionFactory, action

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@action
def fan_out_post(session_factory: SessionFactory, post_id: int, author_id: int) -> int:
    """Write a feed row for the author and for every current follower.

    Rows are inserted in batches of ``FEED_FANOUT_BATCH_SIZE``, each batch in
    its own transaction. Recipients that already have the post are skipped,
    so re-running the job after a crash only fills in what is missing.

    Returns:
        Number of feed rows inserted.
    """
    batch_size = max(1, settings.feed_fanout_batch_size)
    inserted = 0

    with session_factory() as db:
        if db.get(Post, post_id) is None:
            logger.info("Post %s was deleted before fan-out; nothing to do", post_id)
            return 0

        followers = (
            db.query(Follow.follower_id)
            .filter(Follow.following_id == author_id)
            .order_by(Follow.id)
            .all()
        )
        recipients = [author_id] + [follower_id for (follower_id,) in followers]

        for start in range(0, len(recipients), batch_size):
            chunk = recipients[start : start + batch_size]
            present = {
                user_id
                for (user_id,) in db.query(UserFeed.user_id).filter(
                    UserFeed.post_id == post_id, UserFeed.user_id.in_(chunk)
                )
            }
            rows = [
                UserFeed(user_id=user_id, post_id=post_id)
                for user_id in chunk
                if user_id not in present
            ]
            db.add_all(rows)
            db.commit()
            inserted += len(rows)

    logger.info(
        "Fanned out post %s to %d of %d recipients", post_id, inserted, len(recipients)
    )
    return inserted


def get_feed(
    db: Session, user: User, limit: int = DEFAULT_PAGE_SIZE, cursor: int | None = None
) -> dict[str, Any]:
    """Return a page of the user's materialized feed, newest row first.

    ``cursor`` is the feed row id returned as ``next_cursor`` by the previous
    page. Rows whose post has since been deleted are skipped by the join.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    query = (
        db.query(UserFeed, Post, User)
        .join(Post, Post.id == UserFeed.post_id)
        .join(User, User.id == Post.author_id)
        .filter(UserFeed.user_id == user.id)
    )
    if cursor is not None:
        query = query.filter(UserFeed.id < cursor)
    rows = query.order_by(UserFeed.id.desc()).limit(limit + 1).all()

    has_more = len(rows) > limit
    rows = rows[:limit]
    return {
        "items": [{"post": post, "author": author} for _row, post, author in rows],
        "has_more": has_more,
        "next_cursor": rows[-1][0].id if has_more else None,
    }
