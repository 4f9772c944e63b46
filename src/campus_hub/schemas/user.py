# src/campus_hub/schemas/user.py
"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Minimal author/actor card embedded in other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    username: str | None = None
    profile_picture: str | None = None


class UserResponse(UserSummary):
    """Public profile returned by the API."""

    bio: str
    university: str | None
    role: str
    experience_level: str
    skills: list[str]
    social_links: dict[str, Any]
    follower_count: int
    following_count: int
    reputation: int
    level: int
    onboarding_complete: bool
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    bio: str | None = None
    university: str | None = None
    role: str | None = None
    experience_level: str | None = None
    social_links: dict[str, str] | None = None


class SkillRequest(BaseModel):
    skill: str = Field(..., min_length=1)


class NotificationPreferencesUpdate(BaseModel):
    """Per-type notification switches; ``None`` keeps the current value."""

    reactions: bool | None = None
    comments: bool | None = None
    mentions: bool | None = None
    follows: bool | None = None
    events: bool | None = None
    messages: bool | None = None


class FollowPage(BaseModel):
    users: list[UserSummary]
    has_more: bool
    next_cursor: int | None = None


class EndorsementRequest(BaseModel):
    skill_name: str = Field(..., min_length=1, max_length=100)


class EndorsementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    endorser_id: int
    skill_name: str
    created_at: datetime


class SkillEndorsementSummary(BaseModel):
    """Endorsement totals for one skill on a profile."""

    name: str
    count: int
    endorsed_by_viewer: bool
    top_endorsers: list[str]


class EndorsementsResponse(BaseModel):
    skills: list[SkillEndorsementSummary]
