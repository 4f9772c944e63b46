"""Counter maintenance jobs for denormalized fields.

Each job is scheduled after the write that changes a join table and runs in
its own transaction. A missing target row makes the job a no-op. Signed
deltas are applied in SQL and floored at zero, so concurrent jobs cannot lose
updates or drive a counter negative.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import case, func, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from campus_hub.db.time import utcnow
from campus_hub.models import Comment, Community, Event, Hashtag, Job, Post, Reaction, Story, User
from campus_hub.models.reaction import REACTION_TYPES
from campus_hub.services.scheduler import mutation

# Configure logger for this module
logger = logging.getLogger(__name__)


def _floored(column: InstrumentedAttribute[int], delta: int) -> Any:
    return case((column + delta < 0, 0), else_=column + delta)


def _apply_deltas(
    db: Session,
    model: type[Any],
    row_id: int,
    deltas: dict[InstrumentedAttribute[int], int],
) -> bool:
    values = {column.key: _floored(column, delta) for column, delta in deltas.items() if delta}
    if not values:
        return False
    result = db.execute(update(model).where(model.id == row_id).values(**values))
    if result.rowcount == 0:
        logger.debug("%s %s no longer exists; counter update skipped", model.__name__, row_id)
        return False
    return True


@mutation
def increment_post_counts(
    db: Session, post_id: int, comment_count: int = 0, share_count: int = 0
) -> None:
    """Add to a post's comment and share counters."""
    _apply_deltas(
        db,
        Post,
        post_id,
        {Post.comment_count: abs(comment_count), Post.share_count: abs(share_count)},
    )


@mutation
def decrement_post_counts(
    db: Session, post_id: int, comment_count: int = 0, share_count: int = 0
) -> None:
    """Subtract from a post's comment and share counters, never below zero."""
    _apply_deltas(
        db,
        Post,
        post_id,
        {Post.comment_count: -abs(comment_count), Post.share_count: -abs(share_count)},
    )


@mutation
def recount_reactions(db: Session, target_id: int, target_type: str) -> None:
    """Rebuild the reaction counts of a post or comment from its reaction rows.

    Posts also get ``like_count`` set to the total across all types.
    """
    model = Post if target_type == "post" else Comment
    target = db.get(model, target_id, with_for_update=True)
    if target is None:
        logger.debug("Reaction recount skipped; %s %s is gone", target_type, target_id)
        return

    rows = (
        db.query(Reaction.type, func.count(Reaction.id))
        .filter(Reaction.target_id == target_id, Reaction.target_type == target_type)
        .group_by(Reaction.type)
        .all()
    )
    counts = {reaction_type: 0 for reaction_type in REACTION_TYPES}
    for reaction_type, total in rows:
        if reaction_type in counts:
            counts[reaction_type] = total

    target.reaction_counts = counts
    if isinstance(target, Post):
        target.like_count = sum(counts.values())


@mutation
def update_user_follow_counts(
    db: Session, user_id: int, follower_delta: int = 0, following_delta: int = 0
) -> None:
    """Apply signed deltas to a user's follower and following counts."""
    _apply_deltas(
        db,
        User,
        user_id,
        {User.follower_count: follower_delta, User.following_count: following_delta},
    )


@mutation
def update_comment_reply_count(db: Session, comment_id: int, delta: int) -> None:
    """Apply a signed delta to a comment's reply count."""
    _apply_deltas(db, Comment, comment_id, {Comment.reply_count: delta})


@mutation
def update_community_member_count(db: Session, community_id: int, delta: int) -> None:
    """Apply a signed delta to a community's member count."""
    _apply_deltas(db, Community, community_id, {Community.member_count: delta})


@mutation
def update_event_attendee_count(db: Session, event_id: int, delta: int) -> None:
    """Apply a signed delta to an event's attendee count."""
    _apply_deltas(db, Event, event_id, {Event.attendee_count: delta})


@mutation
def update_job_applicant_count(db: Session, job_id: int, delta: int) -> None:
    """Apply a signed delta to a job's applicant count."""
    _apply_deltas(db, Job, job_id, {Job.applicant_count: delta})


@mutation
def update_story_view_count(db: Session, story_id: int, delta: int) -> None:
    """Apply a signed delta to a story's view count."""
    _apply_deltas(db, Story, story_id, {Story.view_count: delta})


@mutation
def update_hashtag_post_count(db: Session, hashtag_id: int, delta: int) -> None:
    """Apply a signed delta to a hashtag's post count.

    A new use also moves ``last_used_at`` forward, which keeps the tag in the
    trending window.
    """
    if _apply_deltas(db, Hashtag, hashtag_id, {Hashtag.post_count: delta}) and delta > 0:
        db.execute(update(Hashtag).where(Hashtag.id == hashtag_id).values(last_used_at=utcnow()))
