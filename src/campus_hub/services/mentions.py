"""@username mention extraction and notification scheduling."""

from __future__ import annotations

import re

from sqlalchemy.orm import Session

from campus_hub.models import User
from campus_hub.services import notifications
from campus_hub.services.scheduler import run_after

MENTION_PATTERN = re.compile(r"@([A-Za-z0-9_]+)")


def extract_mentions(content: str) -> list[str]:
    """Return unique mentioned usernames in order of first appearance."""
    seen: list[str] = []
    for username in MENTION_PATTERN.findall(content or ""):
        if username not in seen:
            seen.append(username)
    return seen


def notify_mentions(db: Session, actor: User, content: str, reference_id: int, where: str) -> int:
    """Schedule a mention notification for every known username in ``content``.

    Unknown usernames and self-mentions are skipped. Returns the number of
    notifications scheduled.
    """
    usernames = extract_mentions(content)
    if not usernames:
        return 0

    mentioned = db.query(User).filter(User.username.in_(usernames)).all()
    scheduled = 0
    for user in mentioned:
        if user.id == actor.id:
            continue
        run_after(
            db,
            0,
            notifications.create_notification,
            recipient_id=user.id,
            actor_id=actor.id,
            type="mention",
            reference_id=str(reference_id),
            message=f"{actor.name} mentioned you in {where}",
        )
        scheduled += 1
    return scheduled
