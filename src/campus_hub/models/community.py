# src/campus_hub/models/community.py
"""SQLAlchemy models for community membership and metadata."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow

COMMUNITY_TYPES = ("public", "private")
MEMBER_ROLES = ("owner", "admin", "member", "pending")


class Community(Base):
    """Community metadata used for grouping posts and members."""

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Internal identifier akin to a handle.
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="public")
    # Cleared when the owning account is deleted.
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=True
    )
    # Pending requests are not counted.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class CommunityMember(Base):
    """Join table mapping users into communities."""

    __tablename__ = "community_member"
    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_community_member"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("community.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="member")
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
