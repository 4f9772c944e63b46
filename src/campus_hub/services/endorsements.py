"""Skill endorsements between users."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from campus_hub.models import SkillEndorsement, User
from campus_hub.services import gamification
from campus_hub.services.errors import ConflictError, NotFoundError, ValidationError
from campus_hub.services.scheduler import run_after

TOP_ENDORSERS = 3


def _normalize(skill_name: str) -> str:
    return (skill_name or "").strip().lower()


def _find(db: Session, endorser_id: int, user_id: int, skill: str) -> SkillEndorsement | None:
    return (
        db.query(SkillEndorsement)
        .filter(
            SkillEndorsement.user_id == user_id,
            SkillEndorsement.skill_name == skill,
            SkillEndorsement.endorser_id == endorser_id,
        )
        .first()
    )


def endorse_skill(db: Session, endorser: User, user_id: int, skill_name: str) -> SkillEndorsement:
    """Vouch for a skill listed on another user's profile.

    The endorsed user is awarded ``skill_endorsed`` reputation and their
    achievements are rechecked once the write commits.

    Raises:
        ValidationError: On a self-endorsement or a skill the user does not list.
        NotFoundError: If the user does not exist.
        ConflictError: If the endorser already endorsed this skill.
    """
    if endorser.id == user_id:
        raise ValidationError("Cannot endorse your own skills")
    target = db.get(User, user_id)
    if target is None:
        raise NotFoundError("User not found")

    skill = _normalize(skill_name)
    if not any(existing.lower() == skill for existing in target.skills or []):
        raise ValidationError("User does not have this skill")
    if _find(db, endorser.id, user_id, skill) is not None:
        raise ConflictError("You have already endorsed this skill")

    endorsement = SkillEndorsement(user_id=user_id, endorser_id=endorser.id, skill_name=skill)
    db.add(endorsement)
    db.flush()

    run_after(db, 0, gamification.award_reputation, user_id=user_id, action="skill_endorsed")
    run_after(db, 0, gamification.check_achievements, user_id=user_id)
    return endorsement


def remove_endorsement(db: Session, endorser: User, user_id: int, skill_name: str) -> None:
    """Withdraw an endorsement the user gave earlier."""
    endorsement = _find(db, endorser.id, user_id, _normalize(skill_name))
    if endorsement is None:
        raise NotFoundError("Endorsement not found")
    db.delete(endorsement)


def get_endorsements(db: Session, user_id: int, viewer_id: int | None = None) -> dict[str, Any]:
    """Summarize endorsements for each skill the user currently lists.

    Each entry has the endorsement count, whether ``viewer_id`` endorsed it
    and the names of the most recent endorsers.
    """
    target = db.get(User, user_id)
    if target is None:
        return {"skills": []}

    rows = (
        db.query(SkillEndorsement, User.name)
        .join(User, User.id == SkillEndorsement.endorser_id)
        .filter(SkillEndorsement.user_id == user_id)
        .order_by(SkillEndorsement.id.desc())
        .all()
    )
    skills = []
    for skill in target.skills or []:
        matching = [(row, name) for row, name in rows if row.skill_name == skill.lower()]
        skills.append(
            {
                "name": skill,
                "count": len(matching),
                "endorsed_by_viewer": viewer_id is not None
                and any(row.endorser_id == viewer_id for row, _ in matching),
                "top_endorsers": [name for _, name in matching[:TOP_ENDORSERS]],
            }
        )
    return {"skills": skills}


def get_my_endorsements(db: Session, user: User) -> list[SkillEndorsement]:
    """Return every endorsement the user has given, newest first."""
    return (
        db.query(SkillEndorsement)
        .filter(SkillEndorsement.endorser_id == user.id)
        .order_by(SkillEndorsement.id.desc())
        .all()
    )
