# src/campus_hub/models/user.py
"""SQLAlchemy models for user profiles."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow

USER_ROLES = ("Student", "Research Scholar", "Faculty")
EXPERIENCE_LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")


class User(Base):
    """Profile row mirrored from the identity provider.

    Follower and following counts are denormalized from the ``follow`` table
    and are only ever changed by scheduled counter jobs.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Subject identifier issued by the identity provider.
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="Anonymous")
    username: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)

    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    university: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="Student")
    experience_level: Mapped[str] = mapped_column(String(32), nullable=False, default="Beginner")
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    social_links: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    # Missing keys mean "enabled"; only an explicit False suppresses a type.
    notification_preferences: Mapped[dict[str, bool]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    follower_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    following_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
