"""Hashtag extraction, post links, trending scores and hashtag queries."""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_hub.core.settings import settings
from campus_hub.db.time import as_utc, utcnow
from campus_hub.models import Hashtag, Post, PostHashtag, User
from campus_hub.services import counters
from campus_hub.services.scheduler import (
    SessionFactory,
    action,
    get_scheduler,
    mutation,
    run_after,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

HASHTAG_PATTERN = re.compile(r"#([A-Za-z0-9_]+)")
MAX_TAG_LENGTH = 100
TRENDING_WINDOW = timedelta(hours=24)
SCORE_DECAY_WINDOW = timedelta(days=7)
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_hashtag(tag: str) -> str:
    """Lowercase ``tag`` and strip whitespace and a leading ``#``."""
    return tag.strip().lower().removeprefix("#")


def extract_hashtags(content: str) -> list[str]:
    """Return the distinct normalized hashtags in ``content``, in order of appearance."""
    seen: dict[str, None] = {}
    for match in HASHTAG_PATTERN.finditer(content):
        tag = match.group(1).lower()
        if len(tag) <= MAX_TAG_LENGTH:
            seen.setdefault(tag, None)
    return list(seen)


def get_hashtag(db: Session, tag: str) -> Hashtag | None:
    return db.query(Hashtag).filter(Hashtag.tag == normalize_hashtag(tag)).first()


def _get_or_create(db: Session, tag: str) -> Hashtag:
    hashtag = get_hashtag(db, tag)
    if hashtag is not None:
        return hashtag
    try:
        with db.begin_nested():
            hashtag = Hashtag(tag=tag, post_count=0, trending_score=0.0)
            db.add(hashtag)
    except IntegrityError:
        # Created by a concurrent post since the lookup above
        hashtag = get_hashtag(db, tag)
        if hashtag is None:
            raise
    return hashtag


def link_hashtags_to_post(db: Session, post_id: int, content: str) -> list[str]:
    """Link every hashtag in ``content`` to the post.

    Hashtag rows are created on first use. Each new link schedules a
    ``post_count`` increment.

    Returns:
        The tags that were newly linked.
    """
    linked: list[str] = []
    for tag in extract_hashtags(content):
        hashtag = _get_or_create(db, tag)
        exists = (
            db.query(PostHashtag.id)
            .filter(PostHashtag.post_id == post_id, PostHashtag.hashtag_id == hashtag.id)
            .first()
        )
        if exists is not None:
            continue
        db.add(PostHashtag(post_id=post_id, hashtag_id=hashtag.id))
        run_after(db, 0, counters.update_hashtag_post_count, hashtag_id=hashtag.id, delta=1)
        linked.append(tag)
    db.flush()
    return linked


def unlink_post_hashtags(db: Session, post_id: int) -> int:
    """Delete the post's hashtag links and schedule the matching decrements."""
    hashtag_ids = [
        hid for (hid,) in db.query(PostHashtag.hashtag_id).filter(PostHashtag.post_id == post_id)
    ]
    for hashtag_id in hashtag_ids:
        run_after(db, 0, counters.update_hashtag_post_count, hashtag_id=hashtag_id, delta=-1)
    db.query(PostHashtag).filter(PostHashtag.post_id == post_id).delete(
        synchronize_session="fetch"
    )
    return len(hashtag_ids)


def _summary(hashtag: Hashtag) -> dict[str, Any]:
    return {
        "id": hashtag.id,
        "tag": hashtag.tag,
        "post_count": hashtag.post_count,
        "trending_score": hashtag.trending_score or 0.0,
        "last_used_at": hashtag.last_used_at,
    }


def get_trending(db: Session, limit: int = 10) -> list[dict[str, Any]]:
    """Return the most used hashtags among those used in the last day."""
    limit = max(1, min(limit, 50))
    hashtags = (
        db.query(Hashtag)
        .filter(Hashtag.last_used_at >= utcnow() - TRENDING_WINDOW, Hashtag.post_count > 0)
        .order_by(Hashtag.post_count.desc(), Hashtag.id)
        .limit(limit)
        .all()
    )
    return [_summary(hashtag) for hashtag in hashtags]


def search_hashtags(db: Session, query: str, limit: int = 5) -> list[dict[str, Any]]:
    """Prefix search for autocomplete, most used first."""
    term = normalize_hashtag(query)
    if not term:
        return []
    hashtags = (
        db.query(Hashtag)
        .filter(Hashtag.tag.startswith(term, autoescape=True))
        .order_by(Hashtag.post_count.desc(), Hashtag.tag)
        .limit(max(1, min(limit, 50)))
        .all()
    )
    return [_summary(hashtag) for hashtag in hashtags]


def get_hashtag_stats(db: Session, tag: str) -> dict[str, Any] | None:
    hashtag = get_hashtag(db, tag)
    return _summary(hashtag) if hashtag is not None else None


def get_posts_by_hashtag(
    db: Session, tag: str, limit: int = DEFAULT_PAGE_SIZE, cursor: int | None = None
) -> dict[str, Any]:
    """Return posts carrying ``tag``, newest first, with an id cursor."""
    hashtag = get_hashtag(db, tag)
    if hashtag is None:
        return {"hashtag": None, "items": [], "has_more": False, "next_cursor": None}

    limit = max(1, min(limit, MAX_PAGE_SIZE))
    query = (
        db.query(Post, User)
        .join(PostHashtag, PostHashtag.post_id == Post.id)
        .join(User, User.id == Post.author_id)
        .filter(PostHashtag.hashtag_id == hashtag.id)
    )
    if cursor is not None:
        query = query.filter(Post.id < cursor)
    rows = query.order_by(Post.id.desc()).limit(limit + 1).all()
    has_more = len(rows) > limit
    rows = rows[:limit]
    return {
        "hashtag": _summary(hashtag),
        "items": [{"post": post, "author": author} for post, author in rows],
        "has_more": has_more,
        "next_cursor": rows[-1][0].id if has_more else None,
    }


@mutation
def update_trending_scores(db: Session) -> int:
    """Recompute trending scores from recency and the last day's links.

    ``score = post_count * max(0, 1 - age_hours / 168) + links_last_24h * 2``
    for tags used in the last week; older tags drop to zero.

    Returns:
        Number of hashtags whose score was recomputed.
    """
    now = utcnow()
    cutoff = now - SCORE_DECAY_WINDOW
    recent_links = dict(
        db.query(PostHashtag.hashtag_id, func.count(PostHashtag.id))
        .filter(PostHashtag.created_at >= now - TRENDING_WINDOW)
        .group_by(PostHashtag.hashtag_id)
        .all()
    )

    active = db.query(Hashtag).filter(Hashtag.last_used_at >= cutoff).all()
    for hashtag in active:
        age_hours = (now - as_utc(hashtag.last_used_at)).total_seconds() / 3600
        recency = max(0.0, 1 - age_hours / (SCORE_DECAY_WINDOW.total_seconds() / 3600))
        score = hashtag.post_count * recency + recent_links.get(hashtag.id, 0) * 2
        hashtag.trending_score = round(score, 2)

    stale = (
        db.query(Hashtag)
        .filter(Hashtag.last_used_at < cutoff, Hashtag.trending_score > 0)
        .all()
    )
    for hashtag in stale:
        hashtag.trending_score = 0.0

    logger.debug("Recomputed %d trending scores, reset %d", len(active), len(stale))
    return len(active)


@action
def refresh_trending_scores(session_factory: SessionFactory) -> None:
    """Recompute trending scores and queue the next refresh."""
    try:
        with session_factory() as db:
            try:
                update_trending_scores(db)
                db.commit()
            except Exception:
                db.rollback()
                raise
    finally:
        get_scheduler().enqueue(
            refresh_trending_scores, settings.trending_refresh_interval_seconds * 1000
        )
