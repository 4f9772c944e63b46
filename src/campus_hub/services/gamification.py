"""Reputation, levels, achievements and the leaderboard."""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_hub.models import Achievement, Comment, Follow, Paper, Post, SkillEndorsement, User
from campus_hub.services.scheduler import mutation

# Configure logger for this module
logger = logging.getLogger(__name__)

REPUTATION_RULES: dict[str, int] = {
    "post_created": 10,
    "comment_created": 5,
    "receive_like": 1,
    "receive_comment": 2,
    "skill_endorsed": 3,
    "answer_accepted": 15,
    "paper_uploaded": 10,
    "resource_uploaded": 5,
    "question_asked": 3,
    "answer_posted": 5,
}

ACHIEVEMENT_DEFINITIONS: dict[str, tuple[str, str]] = {
    "first_post": ("First Post", "Published your first post"),
    "first_comment": ("Commentator", "Left your first comment"),
    "popular_post": ("Trending", "Got 10+ likes on a post"),
    "helpful": ("Helpful", "Had an answer accepted"),
    "scholar": ("Scholar", "Uploaded a research paper"),
    "teacher": ("Teacher", "Shared a study resource"),
    "questioner": ("Curious Mind", "Asked 10 questions"),
    "contributor": ("Top Contributor", "Reached 100 reputation"),
    "expert": ("Expert", "Reached 500 reputation"),
    "legend": ("Legend", "Reached 1000 reputation"),
    "networker": ("Networker", "Followed 20 people"),
    "endorsed": ("Endorsed", "Received 5 skill endorsements"),
    "level_5": ("Level 5", "Reached level 5"),
    "level_10": ("Level 10", "Reached level 10"),
}

POPULAR_POST_LIKES = 10
NETWORKER_FOLLOWS = 20
ENDORSED_THRESHOLD = 5
DEFAULT_LEADERBOARD_SIZE = 20


def calculate_level(reputation: int) -> int:
    """Return ``floor(sqrt(reputation / 10))`` with a minimum of 1."""
    if reputation <= 0:
        return 1
    return max(1, math.floor(math.sqrt(reputation / 10)))


@mutation
def award_reputation(
    db: Session, user_id: int, action: str, amount: int | None = None
) -> dict[str, int] | None:
    """Add reputation for ``action`` and recompute the user's level.

    Unknown actions award nothing unless ``amount`` is given.
    """
    user = db.get(User, user_id, with_for_update=True)
    if user is None:
        return None

    points = amount if amount is not None else REPUTATION_RULES.get(action, 0)
    if points == 0:
        return None

    user.reputation = (user.reputation or 0) + points
    user.level = calculate_level(user.reputation)
    return {"reputation": user.reputation, "level": user.level}


def _earned_badges(db: Session, user_id: int) -> set[str]:
    rows = db.query(Achievement.badge).filter(Achievement.user_id == user_id).all()
    return {badge for (badge,) in rows}


def unlock_achievement(db: Session, user_id: int, badge: str) -> Achievement | None:
    """Insert ``badge`` for the user unless it was already earned."""
    if badge not in ACHIEVEMENT_DEFINITIONS:
        raise ValueError(f"Unknown achievement badge: {badge}")
    if badge in _earned_badges(db, user_id):
        return None

    name, description = ACHIEVEMENT_DEFINITIONS[badge]
    achievement = Achievement(user_id=user_id, badge=badge, name=name, description=description)
    db.add(achievement)
    return achievement


@mutation
def check_achievements(db: Session, user_id: int) -> list[str]:
    """Award every milestone badge the user now qualifies for.

    Milestones are evaluated from source rows rather than denormalized
    counters, so a lagging counter cannot hide or fake a badge.
    """
    user = db.get(User, user_id)
    if user is None:
        return []

    earned = _earned_badges(db, user_id)
    reputation = user.reputation or 0
    level = user.level or 1

    def _count(model: Any, *criteria: Any) -> int:
        return db.query(func.count(model.id)).filter(*criteria).scalar() or 0

    candidates = {
        "contributor": reputation >= 100,
        "expert": reputation >= 500,
        "legend": reputation >= 1000,
        "level_5": level >= 5,
        "level_10": level >= 10,
        "first_post": "first_post" not in earned and _count(Post, Post.author_id == user_id) > 0,
        "first_comment": "first_comment" not in earned
        and _count(Comment, Comment.author_id == user_id) > 0,
        "popular_post": "popular_post" not in earned
        and _count(Post, Post.author_id == user_id, Post.like_count >= POPULAR_POST_LIKES) > 0,
        "networker": "networker" not in earned
        and _count(Follow, Follow.follower_id == user_id) >= NETWORKER_FOLLOWS,
        "scholar": "scholar" not in earned and _count(Paper, Paper.uploaded_by == user_id) > 0,
        "endorsed": "endorsed" not in earned
        and _count(SkillEndorsement, SkillEndorsement.user_id == user_id) >= ENDORSED_THRESHOLD,
    }

    awarded: list[str] = []
    for badge, qualifies in candidates.items():
        if qualifies and badge not in earned:
            unlock_achievement(db, user_id, badge)
            awarded.append(badge)

    if awarded:
        logger.info("User %s earned achievements: %s", user_id, ", ".join(awarded))
    return awarded


def get_achievements(db: Session, user_id: int) -> dict[str, Any]:
    """Return earned achievements plus the full catalogue with earned flags."""
    earned = (
        db.query(Achievement)
        .filter(Achievement.user_id == user_id)
        .order_by(Achievement.earned_at.desc())
        .all()
    )
    by_badge = {achievement.badge: achievement for achievement in earned}
    return {
        "earned": earned,
        "all": [
            {
                "badge": badge,
                "name": name,
                "description": description,
                "earned": badge in by_badge,
                "earned_at": by_badge[badge].earned_at if badge in by_badge else None,
            }
            for badge, (name, description) in ACHIEVEMENT_DEFINITIONS.items()
        ],
    }


def get_leaderboard(
    db: Session, university: str | None = None, limit: int = DEFAULT_LEADERBOARD_SIZE
) -> list[dict[str, Any]]:
    """Return the top users by reputation, optionally within one university."""
    query = db.query(User)
    if university:
        query = query.filter(func.lower(User.university).contains(university.lower()))
    users = query.order_by(User.reputation.desc(), User.id).limit(limit).all()

    achievement_counts = dict(
        db.query(Achievement.user_id, func.count(Achievement.id))
        .filter(Achievement.user_id.in_([user.id for user in users]))
        .group_by(Achievement.user_id)
        .all()
    )
    return [
        {
            "rank": index + 1,
            "id": user.id,
            "name": user.name,
            "username": user.username,
            "profile_picture": user.profile_picture,
            "university": user.university,
            "reputation": user.reputation,
            "level": user.level,
            "achievement_count": achievement_counts.get(user.id, 0),
        }
        for index, user in enumerate(users)
    ]


def get_my_reputation(user: User) -> dict[str, int]:
    """Return reputation, level and progress towards the next level."""
    reputation = user.reputation or 0
    level = user.level or 1
    next_level = level + 1
    rep_for_next_level = next_level * next_level * 10
    progress = min(100, round(reputation / rep_for_next_level * 100))
    return {
        "reputation": reputation,
        "level": level,
        "next_level": next_level,
        "rep_for_next_level": rep_for_next_level,
        "progress": progress,
    }
