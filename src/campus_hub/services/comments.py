"""Threaded comments: creation, listing and subtree deletion."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from sqlalchemy.orm import Session

from campus_hub.models import Comment, Post, Reaction, User
from campus_hub.models.comment import MAX_COMMENT_DEPTH
from campus_hub.services import counters, gamification, notifications
from campus_hub.services.errors import AuthorizationError, NotFoundError, ValidationError
from campus_hub.services.mentions import notify_mentions
from campus_hub.services.scheduler import run_after

# Configure logger for this module
logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 2000


def _validate_content(content: str) -> str:
    if not content or not content.strip():
        raise ValidationError("Comment content cannot be empty")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment content must not exceed {COMMENT_MAX_LENGTH} characters"
        )
    return content


def create_comment(
    db: Session,
    user: User,
    post_id: int,
    content: str,
    parent_comment_id: int | None = None,
) -> Comment:
    """Insert a comment or reply and schedule the bookkeeping jobs.

    Args:
        db: Database session.
        user: Comment author.
        post_id: Post being commented on.
        content: Comment text.
        parent_comment_id: Comment being replied to, if any.

    Returns:
        The new comment. The post's ``comment_count`` catches up once the
        scheduled counter job runs.

    Raises:
        ValidationError: On empty or too long content, a parent on another
            post, or a reply nested deeper than ``MAX_COMMENT_DEPTH``.
        NotFoundError: If the post or parent comment does not exist.
    """
    content = _validate_content(content)
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    parent: Comment | None = None
    depth = 0
    if parent_comment_id is not None:
        parent = db.get(Comment, parent_comment_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError("Parent comment belongs to a different post")
        depth = parent.depth + 1
        if depth > MAX_COMMENT_DEPTH:
            raise ValidationError(f"Replies cannot be nested more than {MAX_COMMENT_DEPTH} levels")

    comment = Comment(
        post_id=post_id,
        author_id=user.id,
        parent_comment_id=parent_comment_id,
        depth=depth,
        content=content,
    )
    db.add(comment)
    db.flush()

    run_after(db, 0, counters.increment_post_counts, post_id=post_id, comment_count=1)
    if parent is not None:
        run_after(db, 0, counters.update_comment_reply_count, comment_id=parent.id, delta=1)
        run_after(
            db,
            0,
            notifications.create_notification,
            recipient_id=parent.author_id,
            actor_id=user.id,
            type="reply",
            reference_id=str(post_id),
            message=f"{user.name} replied to your comment",
        )
    else:
        run_after(
            db,
            0,
            notifications.create_notification,
            recipient_id=post.author_id,
            actor_id=user.id,
            type="comment",
            reference_id=str(post_id),
            message=f"{user.name} commented on your post",
        )
    notify_mentions(db, user, content, post_id, "a comment")

    run_after(db, 0, gamification.award_reputation, user_id=user.id, action="comment_created")
    run_after(db, 0, gamification.check_achievements, user_id=user.id)
    if post.author_id != user.id:
        run_after(
            db, 0, gamification.award_reputation, user_id=post.author_id, action="receive_comment"
        )
    return comment


def get_post_comments(db: Session, post_id: int) -> list[dict[str, Any]]:
    """Return every comment on a post, oldest first, with its author."""
    rows = (
        db.query(Comment, User)
        .join(User, User.id == Comment.author_id)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )
    return [{"comment": comment, "author": author} for comment, author in rows]


def collect_subtree(db: Session, root_id: int) -> list[int]:
    """Return ``root_id`` and every transitive reply id, breadth first.

    Replies only point at their parent, so the tree is walked level by level
    over the ``parent_comment_id`` index.
    """
    collected = [root_id]
    queue: deque[int] = deque([root_id])
    while queue:
        current = queue.popleft()
        children = (
            db.query(Comment.id).filter(Comment.parent_comment_id == current).all()
        )
        for (child_id,) in children:
            collected.append(child_id)
            queue.append(child_id)
    return collected


def purge_comment_subtree(db: Session, comment: Comment) -> int:
    """Delete a comment, its replies and their reactions; schedule the counter fixes.

    Returns the number of comments removed.
    """
    ids = collect_subtree(db, comment.id)
    post_id = comment.post_id
    parent_id = comment.parent_comment_id

    db.query(Reaction).filter(
        Reaction.target_type == "comment", Reaction.target_id.in_(ids)
    ).delete(synchronize_session="fetch")
    db.query(Comment).filter(Comment.id.in_(ids)).delete(synchronize_session="fetch")

    run_after(db, 0, counters.decrement_post_counts, post_id=post_id, comment_count=len(ids))
    if parent_id is not None and parent_id not in ids:
        run_after(db, 0, counters.update_comment_reply_count, comment_id=parent_id, delta=-1)
    return len(ids)


def delete_comment(db: Session, user: User, comment_id: int) -> int:
    """Delete the user's comment together with all replies beneath it.

    Raises:
        NotFoundError: If the comment does not exist.
        AuthorizationError: If the user did not write the comment.
    """
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.author_id != user.id:
        raise AuthorizationError("You can only delete your own comments")

    removed = purge_comment_subtree(db, comment)
    logger.info("Deleted comment %s with %d replies", comment_id, removed - 1)
    return removed
