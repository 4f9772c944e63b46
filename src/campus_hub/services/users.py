"""User lifecycle from identity webhooks plus profile management."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_hub.models import User
from campus_hub.models.user import EXPERIENCE_LEVELS, USER_ROLES
from campus_hub.services.errors import ConflictError, NotFoundError, ValidationError

# Configure logger for this module
logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 500
UNIVERSITY_MAX_LENGTH = 200
SKILL_MAX_LENGTH = 50
MAX_SKILLS = 20
SEARCH_LIMIT = 50
SOCIAL_LINK_KEYS = ("github", "linkedin", "twitter", "website")
PREFERENCE_KEYS = ("reactions", "comments", "mentions", "follows", "events", "messages")


def profile_fields_from_event(data: Mapping[str, Any]) -> dict[str, Any]:
    """Extract the profile fields we mirror from an identity provider user payload."""
    addresses = data.get("email_addresses") or []
    email = ""
    if addresses:
        email = addresses[0].get("email_address") or ""
    first_name = data.get("first_name") or ""
    last_name = data.get("last_name") or ""
    name = f"{first_name} {last_name}".strip() or "Anonymous"
    return {
        "external_id": data["id"],
        "email": email,
        "name": name,
        "username": data.get("username") or None,
        "profile_picture": data.get("image_url") or None,
    }


def get_user_by_external_id(db: Session, external_id: str) -> User | None:
    """Return the user mirrored from an identity provider subject."""
    return db.query(User).filter(User.external_id == external_id).first()


def create_user_from_webhook(db: Session, fields: Mapping[str, Any]) -> User:
    """Create the local user for a ``user.created`` event.

    Replayed events return the existing row unchanged.
    """
    existing = get_user_by_external_id(db, fields["external_id"])
    if existing is not None:
        logger.info("User %s already exists; ignoring duplicate create", fields["external_id"])
        return existing

    user = User(
        external_id=fields["external_id"],
        email=fields.get("email") or "",
        name=fields.get("name") or "Anonymous",
        username=fields.get("username"),
        profile_picture=fields.get("profile_picture"),
        bio="",
        role="Student",
        experience_level="Beginner",
        skills=[],
        social_links={},
        notification_preferences={},
        follower_count=0,
        following_count=0,
        reputation=0,
        level=1,
        onboarding_complete=False,
    )
    db.add(user)
    db.flush()
    logger.info("Created user %s for subject %s", user.id, user.external_id)
    return user


def update_user_from_webhook(db: Session, fields: Mapping[str, Any]) -> User:
    """Apply a ``user.updated`` event to the mirrored profile fields."""
    user = get_user_by_external_id(db, fields["external_id"])
    if user is None:
        raise NotFoundError("User not found")

    user.email = fields.get("email") or ""
    user.name = fields.get("name") or "Anonymous"
    if fields.get("username"):
        user.username = fields["username"]
    if fields.get("profile_picture"):
        user.profile_picture = fields["profile_picture"]
    return user


def update_profile(db: Session, user: User, changes: Mapping[str, Any]) -> User:
    """Apply a partial profile update.

    Only keys present in ``changes`` are touched; ``None`` values are ignored.

    Raises:
        ValidationError: On over-long text or values outside the allowed sets.
    """
    bio = changes.get("bio")
    if bio is not None:
        if len(bio) > BIO_MAX_LENGTH:
            raise ValidationError(f"Bio must not exceed {BIO_MAX_LENGTH} characters")
        user.bio = bio.strip()

    university = changes.get("university")
    if university is not None:
        if len(university) > UNIVERSITY_MAX_LENGTH:
            raise ValidationError(
                f"University name must not exceed {UNIVERSITY_MAX_LENGTH} characters"
            )
        user.university = university.strip()

    role = changes.get("role")
    if role is not None:
        if role not in USER_ROLES:
            raise ValidationError(f"Invalid role: {role}")
        user.role = role

    experience_level = changes.get("experience_level")
    if experience_level is not None:
        if experience_level not in EXPERIENCE_LEVELS:
            raise ValidationError(f"Invalid experience level: {experience_level}")
        user.experience_level = experience_level

    social_links = changes.get("social_links")
    if social_links is not None:
        user.social_links = {
            key: social_links[key].strip()
            for key in SOCIAL_LINK_KEYS
            if social_links.get(key)
        }

    return user


def add_skill(db: Session, user: User, skill: str) -> list[str]:
    """Append a skill to the user's profile and return the new list."""
    skill = (skill or "").strip()
    if not skill:
        raise ValidationError("Skill name cannot be empty")
    if len(skill) > SKILL_MAX_LENGTH:
        raise ValidationError(f"Skill name must not exceed {SKILL_MAX_LENGTH} characters")

    skills = list(user.skills or [])
    if skill in skills:
        raise ConflictError("Skill already exists")
    if len(skills) >= MAX_SKILLS:
        raise ValidationError(f"Cannot add more than {MAX_SKILLS} skills")

    skills.append(skill)
    user.skills = skills
    return skills


def remove_skill(db: Session, user: User, skill: str) -> list[str]:
    """Remove a skill from the user's profile and return the new list."""
    skills = [existing for existing in (user.skills or []) if existing != skill]
    user.skills = skills
    return skills


def update_notification_preferences(
    db: Session, user: User, preferences: Mapping[str, bool | None]
) -> dict[str, bool]:
    """Merge explicit preference flags into the user's stored map."""
    merged = dict(user.notification_preferences or {})
    for key, value in preferences.items():
        if key not in PREFERENCE_KEYS:
            raise ValidationError(f"Unknown notification preference: {key}")
        if value is not None:
            merged[key] = bool(value)
    user.notification_preferences = merged
    return merged


def complete_onboarding(db: Session, user: User) -> User:
    """Mark the onboarding flow as finished."""
    user.onboarding_complete = True
    return user


def search_users(
    db: Session,
    query: str | None = None,
    role: str | None = None,
    skills: list[str] | None = None,
    limit: int = SEARCH_LIMIT,
) -> list[User]:
    """Search users by name substring, role and any of the given skills."""
    if role is not None and role not in USER_ROLES:
        raise ValidationError(f"Invalid role: {role}")

    base = db.query(User)
    if query:
        base = base.filter(func.lower(User.name).contains(query.lower()))
    if role:
        base = base.filter(User.role == role)
    users = base.order_by(User.reputation.desc(), User.id).all()

    # Skills live in a JSON column; filter in Python to stay portable.
    if skills:
        wanted = set(skills)
        users = [user for user in users if wanted.intersection(user.skills or [])]
    return users[:limit]


def get_user(db: Session, user_id: int) -> User:
    """Return a user by id."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
