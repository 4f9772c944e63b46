"""Recompute denormalized counters from the rows they summarize.

Scheduled counter jobs are not retried, so a failed job leaves a counter off
by its delta until this pass runs.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import InstrumentedAttribute, Session

from campus_hub.models import (
    Comment,
    Community,
    CommunityMember,
    Event,
    EventRSVP,
    Follow,
    Hashtag,
    Job,
    JobApplication,
    Poll,
    PollVote,
    Post,
    PostHashtag,
    Reaction,
    Repost,
    Story,
    StoryView,
    User,
)
from campus_hub.models.reaction import REACTION_TYPES

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Correction:
    """One counter whose stored value disagreed with its source rows."""

    table: str
    row_id: int
    field: str
    stored: Any
    actual: Any


def _grouped_counts(db: Session, key: InstrumentedAttribute[Any], *criteria: Any) -> dict[Any, int]:
    query = db.query(key, func.count()).filter(*criteria).group_by(key)
    return {row_key: total for row_key, total in query}


def _reconcile_column(
    db: Session,
    model: type[Any],
    column: InstrumentedAttribute[int],
    actual: dict[int, int],
    dry_run: bool,
) -> list[Correction]:
    corrections = []
    for row_id, stored in db.query(model.id, column):
        expected = actual.get(row_id, 0)
        if (stored or 0) == expected:
            continue
        corrections.append(
            Correction(model.__tablename__, row_id, column.key, stored, expected)
        )
        if not dry_run:
            db.query(model).filter(model.id == row_id).update(
                {column: expected}, synchronize_session="fetch"
            )
    return corrections


def _reaction_totals(db: Session, target_type: str) -> dict[int, dict[str, int]]:
    totals: dict[int, dict[str, int]] = defaultdict(
        lambda: {reaction_type: 0 for reaction_type in REACTION_TYPES}
    )
    rows = (
        db.query(Reaction.target_id, Reaction.type, func.count())
        .filter(Reaction.target_type == target_type)
        .group_by(Reaction.target_id, Reaction.type)
    )
    for target_id, reaction_type, total in rows:
        if reaction_type in REACTION_TYPES:
            totals[target_id][reaction_type] = total
    return totals


def _reconcile_reactions(db: Session, model: type[Any], dry_run: bool) -> list[Correction]:
    target_type = "post" if model is Post else "comment"
    totals = _reaction_totals(db, target_type)
    empty = {reaction_type: 0 for reaction_type in REACTION_TYPES}
    corrections = []

    for row in db.query(model):
        expected = totals.get(row.id, empty)
        stored = {key: (row.reaction_counts or {}).get(key, 0) for key in REACTION_TYPES}
        if stored != expected:
            corrections.append(
                Correction(model.__tablename__, row.id, "reaction_counts", stored, dict(expected))
            )
            if not dry_run:
                row.reaction_counts = dict(expected)
        if model is Post:
            expected_likes = sum(expected.values())
            if row.like_count != expected_likes:
                corrections.append(
                    Correction("post", row.id, "like_count", row.like_count, expected_likes)
                )
                if not dry_run:
                    row.like_count = expected_likes
    return corrections


def _reconcile_polls(db: Session, dry_run: bool) -> list[Correction]:
    votes: dict[int, dict[str, int]] = defaultdict(dict)
    rows = db.query(PollVote.poll_id, PollVote.option_id, func.count()).group_by(
        PollVote.poll_id, PollVote.option_id
    )
    for poll_id, option_id, total in rows:
        votes[poll_id][option_id] = total

    corrections = []
    for poll in db.query(Poll):
        counted = votes.get(poll.id, {})
        options = [
            dict(option, vote_count=counted.get(option["id"], 0)) for option in poll.options
        ]
        total = sum(option["vote_count"] for option in options)
        if options != poll.options:
            corrections.append(Correction("poll", poll.id, "options", poll.options, options))
            if not dry_run:
                poll.options = options
        if poll.total_votes != total:
            corrections.append(Correction("poll", poll.id, "total_votes", poll.total_votes, total))
            if not dry_run:
                poll.total_votes = total
    return corrections


def reconcile_counters(db: Session, dry_run: bool = False) -> list[Correction]:
    """Compare every counter with its source rows and fix the ones that drifted.

    Changes are flushed but not committed; the caller owns the transaction.
    With ``dry_run`` nothing is written.

    Returns:
        The corrections found, in table order.
    """
    column_sources: list[tuple[type[Any], InstrumentedAttribute[int], dict[int, int]]] = [
        (Post, Post.comment_count, _grouped_counts(db, Comment.post_id)),
        (Post, Post.share_count, _grouped_counts(db, Repost.original_post_id)),
        (
            Comment,
            Comment.reply_count,
            _grouped_counts(
                db, Comment.parent_comment_id, Comment.parent_comment_id.is_not(None)
            ),
        ),
        (User, User.follower_count, _grouped_counts(db, Follow.following_id)),
        (User, User.following_count, _grouped_counts(db, Follow.follower_id)),
        (
            Community,
            Community.member_count,
            _grouped_counts(db, CommunityMember.community_id, CommunityMember.role != "pending"),
        ),
        (
            Event,
            Event.attendee_count,
            _grouped_counts(db, EventRSVP.event_id, EventRSVP.status == "going"),
        ),
        (Job, Job.applicant_count, _grouped_counts(db, JobApplication.job_id)),
        (Story, Story.view_count, _grouped_counts(db, StoryView.story_id)),
        (Hashtag, Hashtag.post_count, _grouped_counts(db, PostHashtag.hashtag_id)),
    ]

    corrections: list[Correction] = []
    for model, column, actual in column_sources:
        corrections.extend(_reconcile_column(db, model, column, actual, dry_run))
    corrections.extend(_reconcile_reactions(db, Post, dry_run))
    corrections.extend(_reconcile_reactions(db, Comment, dry_run))
    corrections.extend(_reconcile_polls(db, dry_run))

    if not dry_run:
        db.flush()
    logger.info(
        "Counter reconciliation found %d drifted values%s",
        len(corrections),
        " (dry run)" if dry_run else "",
    )
    return corrections
