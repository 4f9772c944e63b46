"""Post creation, reads and cascading deletion."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from campus_hub.models import Bookmark, Comment, Community, Post, Reaction, Repost, User, UserFeed
from campus_hub.services import feed, gamification, hashtags
from campus_hub.services.errors import AuthorizationError, NotFoundError, ValidationError
from campus_hub.services.mentions import notify_mentions
from campus_hub.services.scheduler import run_after

# Configure logger for this module
logger = logging.getLogger(__name__)

POST_MAX_LENGTH = 5000
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def create_post(
    db: Session, user: User, content: str, community_id: int | None = None
) -> Post:
    """Insert a post, link its hashtags and schedule fan-out, mentions and reputation.

    The post is returned as soon as it is written; followers see it in their
    feeds once the fan-out job has run.

    Raises:
        ValidationError: If the content is empty or too long.
        NotFoundError: If ``community_id`` does not exist.
    """
    if not content or not content.strip():
        raise ValidationError("Post content cannot be empty")
    if len(content) > POST_MAX_LENGTH:
        raise ValidationError(f"Post content must not exceed {POST_MAX_LENGTH} characters")
    if community_id is not None and db.get(Community, community_id) is None:
        raise NotFoundError("Community not found")

    post = Post(
        author_id=user.id,
        community_id=community_id,
        content=content,
        like_count=0,
        comment_count=0,
        share_count=0,
        reaction_counts={},
    )
    db.add(post)
    db.flush()

    hashtags.link_hashtags_to_post(db, post.id, content)
    run_after(db, 0, feed.fan_out_post, post_id=post.id, author_id=user.id)
    notify_mentions(db, user, content, post.id, "a post")
    run_after(db, 0, gamification.award_reputation, user_id=user.id, action="post_created")
    run_after(db, 0, gamification.check_achievements, user_id=user.id)
    return post


def get_post(db: Session, post_id: int) -> dict[str, Any]:
    """Return a post with its author."""
    row = (
        db.query(Post, User)
        .join(User, User.id == Post.author_id)
        .filter(Post.id == post_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Post not found")
    post, author = row
    return {"post": post, "author": author}


def _page(query: Any, limit: int, cursor: int | None) -> dict[str, Any]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    if cursor is not None:
        query = query.filter(Post.id < cursor)
    rows = query.order_by(Post.id.desc()).limit(limit + 1).all()
    has_more = len(rows) > limit
    rows = rows[:limit]
    return {
        "items": [{"post": post, "author": author} for post, author in rows],
        "has_more": has_more,
        "next_cursor": rows[-1][0].id if has_more else None,
    }


def list_user_posts(
    db: Session, author_id: int, limit: int = DEFAULT_PAGE_SIZE, cursor: int | None = None
) -> dict[str, Any]:
    """Return one author's posts, newest first."""
    query = db.query(Post, User).join(User, User.id == Post.author_id)
    return _page(query.filter(Post.author_id == author_id), limit, cursor)


def list_recent_posts(
    db: Session,
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: int | None = None,
    community_id: int | None = None,
) -> dict[str, Any]:
    """Return the newest posts across the network or within one community."""
    query = db.query(Post, User).join(User, User.id == Post.author_id)
    if community_id is not None:
        query = query.filter(Post.community_id == community_id)
    return _page(query, limit, cursor)


def purge_post(db: Session, post: Post) -> dict[str, int]:
    """Remove a post and everything that hangs off it, in the caller's transaction.

    Comments (with the reactions on them), reactions on the post, reposts,
    bookmarks, feed rows and hashtag links are deleted before the post row
    itself.

    Returns:
        Number of rows removed per table.
    """
    comment_ids = [cid for (cid,) in db.query(Comment.id).filter(Comment.post_id == post.id)]
    removed = {"comment_reactions": 0, "comments": 0}
    if comment_ids:
        removed["comment_reactions"] = (
            db.query(Reaction)
            .filter(Reaction.target_type == "comment", Reaction.target_id.in_(comment_ids))
            .delete(synchronize_session="fetch")
        )
        removed["comments"] = (
            db.query(Comment)
            .filter(Comment.id.in_(comment_ids))
            .delete(synchronize_session="fetch")
        )
    removed["reactions"] = (
        db.query(Reaction)
        .filter(Reaction.target_type == "post", Reaction.target_id == post.id)
        .delete(synchronize_session="fetch")
    )
    removed["reposts"] = (
        db.query(Repost)
        .filter(Repost.original_post_id == post.id)
        .delete(synchronize_session="fetch")
    )
    removed["bookmarks"] = (
        db.query(Bookmark).filter(Bookmark.post_id == post.id).delete(synchronize_session="fetch")
    )
    removed["feed_rows"] = (
        db.query(UserFeed).filter(UserFeed.post_id == post.id).delete(synchronize_session="fetch")
    )
    removed["hashtags"] = hashtags.unlink_post_hashtags(db, post.id)
    db.delete(post)
    db.flush()
    return removed


def delete_post(db: Session, user: User, post_id: int) -> dict[str, int]:
    """Delete the user's own post with all of its dependent rows.

    Raises:
        NotFoundError: If the post does not exist.
        AuthorizationError: If the user is not the author.
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.author_id != user.id:
        raise AuthorizationError("Forbidden: You can only delete your own posts")

    removed = purge_post(db, post)
    logger.info("Deleted post %s: %s", post_id, removed)
    return removed
