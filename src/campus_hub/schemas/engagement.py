# src/campus_hub/schemas/engagement.py
"""Schemas for reactions, reposts, bookmarks, notifications and achievements."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .post import PostResponse
from .user import UserSummary


class ReactionRequest(BaseModel):
    target_id: int
    target_type: str = Field(..., description="post or comment")
    type: str = Field(..., description="Reaction type, e.g. like or scholarly")


class ReactionResult(BaseModel):
    success: bool
    action: str | None = None
    message: str | None = None


class TopReaction(BaseModel):
    type: str
    count: int


class ReactionSummary(BaseModel):
    counts: dict[str, int]
    total: int
    top_reactions: list[TopReaction]
    user_reaction: str | None = None


class RepostCreate(BaseModel):
    quote_content: str | None = Field(None, max_length=500)


class RepostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    original_post_id: int
    quote_content: str | None
    created_at: datetime


class BookmarkCreate(BaseModel):
    collection_name: str | None = Field(None, max_length=100)


class BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    post_id: int
    collection_name: str
    created_at: datetime


class BookmarkResult(BaseModel):
    status: str
    bookmark: BookmarkResponse


class BookmarkItem(BaseModel):
    bookmark: BookmarkResponse
    post: PostResponse


class BookmarkPage(BaseModel):
    items: list[BookmarkItem]
    has_more: bool
    next_cursor: str | None = None


class CollectionSummary(BaseModel):
    name: str
    count: int


class NotificationResponse(BaseModel):
    """Schema for a notification returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    message: str
    reference_id: str | None
    is_read: bool
    created_at: datetime
    actor: UserSummary | None = None


class NotificationPage(BaseModel):
    notifications: list[NotificationResponse]
    has_more: bool
    next_cursor: str | None = None


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    badge: str
    name: str
    description: str
    earned_at: datetime


class AchievementStatus(BaseModel):
    badge: str
    name: str
    description: str
    earned: bool
    earned_at: datetime | None = None


class AchievementOverview(BaseModel):
    earned: list[AchievementResponse]
    all: list[AchievementStatus]


class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    name: str
    username: str | None
    profile_picture: str | None
    university: str | None
    reputation: int
    level: int
    achievement_count: int


class ReputationProgress(BaseModel):
    reputation: int
    level: int
    next_level: int
    rep_for_next_level: int
    progress: int
