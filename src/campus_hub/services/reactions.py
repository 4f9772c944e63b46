"""Reaction upsert and reaction queries for posts and comments."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_hub.db.time import utcnow
from campus_hub.models import Comment, Post, Reaction, User
from campus_hub.models.reaction import REACTION_TYPES, TARGET_TYPES
from campus_hub.services import counters, gamification, notifications
from campus_hub.services.errors import NotFoundError, ValidationError
from campus_hub.services.scheduler import run_after

# Configure logger for this module
logger = logging.getLogger(__name__)

REACTION_EMOJI = {
    "like": "\N{THUMBS UP SIGN}",
    "love": "\N{HEAVY BLACK HEART}\N{VARIATION SELECTOR-16}",
    "laugh": "\N{FACE WITH TEARS OF JOY}",
    "wow": "\N{FACE WITH OPEN MOUTH}",
    "sad": "\N{CRYING FACE}",
    "scholarly": "\N{GRADUATION CAP}",
}


def _validate(target_type: str, reaction_type: str | None = None) -> None:
    if target_type not in TARGET_TYPES:
        raise ValidationError(f"Invalid target type: {target_type}")
    if reaction_type is not None and reaction_type not in REACTION_TYPES:
        raise ValidationError(f"Invalid reaction type: {reaction_type}")


def _target_author(db: Session, target_id: int, target_type: str) -> int:
    model = Post if target_type == "post" else Comment
    target = db.get(model, target_id)
    if target is None:
        raise NotFoundError(f"{target_type.capitalize()} not found")
    return target.author_id


def _find(db: Session, user_id: int, target_id: int, target_type: str) -> Reaction | None:
    return (
        db.query(Reaction)
        .filter(
            Reaction.user_id == user_id,
            Reaction.target_id == target_id,
            Reaction.target_type == target_type,
        )
        .first()
    )


def _change_type(
    db: Session, existing: Reaction, reaction_type: str, target_id: int, target_type: str
) -> dict[str, Any]:
    if existing.type == reaction_type:
        return {"success": True, "action": "no-change"}
    existing.type = reaction_type
    existing.created_at = utcnow()
    run_after(db, 0, counters.recount_reactions, target_id=target_id, target_type=target_type)
    return {"success": True, "action": "updated"}


def add_reaction(
    db: Session, user: User, target_id: int, target_type: str, reaction_type: str
) -> dict[str, Any]:
    """Create, change or keep the user's single reaction on a target.

    Returns ``{"success": True, "action": ...}`` where action is
    ``"created"``, ``"updated"`` or ``"no-change"``. Only a newly created
    reaction notifies the target's author and awards them reputation.
    """
    _validate(target_type, reaction_type)
    author_id = _target_author(db, target_id, target_type)

    existing = _find(db, user.id, target_id, target_type)
    if existing is not None:
        return _change_type(db, existing, reaction_type, target_id, target_type)

    try:
        with db.begin_nested():
            db.add(
                Reaction(
                    user_id=user.id,
                    target_id=target_id,
                    target_type=target_type,
                    type=reaction_type,
                )
            )
    except IntegrityError:
        # Another request inserted the same reaction since the lookup above
        raced = _find(db, user.id, target_id, target_type)
        if raced is None:
            raise
        logger.info("Concurrent reaction by user %s on %s %s", user.id, target_type, target_id)
        return _change_type(db, raced, reaction_type, target_id, target_type)

    run_after(db, 0, counters.recount_reactions, target_id=target_id, target_type=target_type)

    if author_id != user.id:
        run_after(
            db,
            0,
            notifications.create_notification,
            recipient_id=author_id,
            actor_id=user.id,
            type="reaction",
            reference_id=str(target_id),
            message=f"{user.name} reacted {REACTION_EMOJI[reaction_type]} to your {target_type}",
        )
        run_after(db, 0, gamification.award_reputation, user_id=author_id, action="receive_like")
        run_after(db, 0, gamification.check_achievements, user_id=author_id)

    return {"success": True, "action": "created"}


def remove_reaction(db: Session, user: User, target_id: int, target_type: str) -> dict[str, Any]:
    """Delete the user's reaction on a target and schedule a recount."""
    _validate(target_type)
    existing = _find(db, user.id, target_id, target_type)
    if existing is None:
        return {"success": False, "message": "Reaction not found"}

    db.delete(existing)
    run_after(db, 0, counters.recount_reactions, target_id=target_id, target_type=target_type)
    return {"success": True}


def get_reactions(db: Session, target_id: int, target_type: str) -> dict[str, Any]:
    """Return per-type counts, the total and the three most used types."""
    _validate(target_type)
    counts = {reaction_type: 0 for reaction_type in REACTION_TYPES}
    rows = (
        db.query(Reaction.type)
        .filter(Reaction.target_id == target_id, Reaction.target_type == target_type)
        .all()
    )
    for (reaction_type,) in rows:
        counts[reaction_type] = counts.get(reaction_type, 0) + 1

    ranked = sorted(
        ((reaction_type, count) for reaction_type, count in counts.items() if count > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    return {
        "counts": counts,
        "total": sum(counts.values()),
        "top_reactions": [{"type": t, "count": c} for t, c in ranked[:3]],
    }


def get_user_reaction(db: Session, user: User, target_id: int, target_type: str) -> str | None:
    """Return the user's reaction type on a target, if any."""
    _validate(target_type)
    reaction = _find(db, user.id, target_id, target_type)
    return reaction.type if reaction else None


def get_reaction_users(
    db: Session,
    target_id: int,
    target_type: str,
    reaction_type: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """List who reacted to a target, optionally filtered by type."""
    _validate(target_type, reaction_type)
    query = (
        db.query(Reaction, User)
        .join(User, User.id == Reaction.user_id)
        .filter(Reaction.target_id == target_id, Reaction.target_type == target_type)
    )
    if reaction_type:
        query = query.filter(Reaction.type == reaction_type)
    query = query.order_by(Reaction.id)
    if limit:
        query = query.limit(limit)

    return [
        {
            "user": {
                "id": user.id,
                "name": user.name,
                "profile_picture": user.profile_picture,
                "role": user.role,
            },
            "reaction_type": reaction.type,
            "created_at": reaction.created_at,
        }
        for reaction, user in query.all()
    ]
