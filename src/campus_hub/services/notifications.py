"""Notification emission and inbox queries."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_hub.models import Notification, User
from campus_hub.models.notification import NOTIFICATION_TYPES
from campus_hub.services.errors import AuthorizationError, NotFoundError, ValidationError
from campus_hub.services.scheduler import mutation

# Configure logger for this module
logger = logging.getLogger(__name__)

NOTIFICATION_MAX_LENGTH = 500
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
RECENT_LIMIT = 5

# Preference key consulted for each notification type.
PREFERENCE_KEYS = {
    "reaction": "reactions",
    "comment": "comments",
    "reply": "comments",
    "mention": "mentions",
    "follow": "follows",
    "event": "events",
    "message": "messages",
}


@mutation
def create_notification(
    db: Session,
    recipient_id: int,
    actor_id: int,
    type: str,
    message: str,
    reference_id: str | None = None,
) -> Notification | None:
    """Insert a notification unless it is self-directed or muted.

    Args:
        db: Database session.
        recipient_id: User receiving the notification.
        actor_id: User whose action triggered it.
        type: One of ``NOTIFICATION_TYPES``.
        message: Human readable text, at most ``NOTIFICATION_MAX_LENGTH`` characters.
        reference_id: Id of the post, comment or user the notification points at.

    Returns:
        The new notification, or None when nothing was written.

    Raises:
        ValidationError: If the type is unknown or the message is too long.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValidationError(f"Unknown notification type: {type}")
    if len(message) > NOTIFICATION_MAX_LENGTH:
        raise ValidationError(
            f"Notification message too long (max {NOTIFICATION_MAX_LENGTH} characters)"
        )

    if recipient_id == actor_id:
        return None

    recipient = db.get(User, recipient_id)
    if recipient is None:
        logger.debug("Notification recipient %s no longer exists", recipient_id)
        return None

    preferences = recipient.notification_preferences or {}
    if preferences.get(PREFERENCE_KEYS[type]) is False:
        return None

    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        type=type,
        reference_id=reference_id,
        message=message,
        is_read=False,
    )
    db.add(notification)
    db.flush()
    return notification


def _actor_summary(db: Session, actor_ids: set[int]) -> dict[int, dict[str, Any]]:
    if not actor_ids:
        return {}
    actors = db.query(User).filter(User.id.in_(actor_ids)).all()
    return {
        actor.id: {
            "id": actor.id,
            "name": actor.name,
            "username": actor.username,
            "profile_picture": actor.profile_picture,
        }
        for actor in actors
    }


def list_notifications(
    db: Session,
    user: User,
    *,
    filter: str = "all",
    limit: int = DEFAULT_PAGE_SIZE,
    cursor: str | None = None,
) -> dict[str, Any]:
    """Return a page of the user's notifications, newest first.

    ``filter`` is ``"all"``, ``"unread"`` or a notification type. ``cursor``
    is the offset returned as ``next_cursor`` by the previous page.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    offset = int(cursor) if cursor and cursor.isdigit() else 0

    query = db.query(Notification).filter(Notification.recipient_id == user.id)
    if filter == "unread":
        query = query.filter(Notification.is_read.is_(False))
    elif filter != "all":
        if filter not in NOTIFICATION_TYPES:
            raise ValidationError(f"Unknown notification filter: {filter}")
        query = query.filter(Notification.type == filter)

    rows = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit + 1)
        .all()
    )
    has_more = len(rows) > limit
    rows = rows[:limit]
    actors = _actor_summary(db, {row.actor_id for row in rows})

    return {
        "notifications": [
            {
                "id": row.id,
                "type": row.type,
                "message": row.message,
                "reference_id": row.reference_id,
                "is_read": row.is_read,
                "created_at": row.created_at,
                "actor": actors.get(row.actor_id),
            }
            for row in rows
        ],
        "has_more": has_more,
        "next_cursor": str(offset + limit) if has_more else None,
    }


def get_recent_notifications(db: Session, user: User) -> list[Notification]:
    """Return the five newest notifications for the header dropdown."""
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )


def _owned_notification(db: Session, user: User, notification_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != user.id:
        raise AuthorizationError("Not authorized to modify this notification")
    return notification


def mark_as_read(db: Session, user: User, notification_id: int) -> Notification:
    """Mark a single notification as read."""
    notification = _owned_notification(db, user, notification_id)
    notification.is_read = True
    return notification


def mark_all_as_read(db: Session, user: User) -> int:
    """Mark every unread notification as read and return how many changed."""
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user.id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session="fetch")
    )


def get_unread_count(db: Session, user: User) -> int:
    """Count unread notifications; computed on every read."""
    return (
        db.query(func.count(Notification.id))
        .filter(Notification.recipient_id == user.id, Notification.is_read.is_(False))
        .scalar()
        or 0
    )


def delete_notification(db: Session, user: User, notification_id: int) -> None:
    """Delete one of the user's notifications."""
    notification = _owned_notification(db, user, notification_id)
    db.delete(notification)
