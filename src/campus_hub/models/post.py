# src/campus_hub/models/post.py
"""SQLAlchemy models for posts and the materialized home feed."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow


class Post(Base):
    """Primary content entity produced by users.

    ``like_count`` is the legacy aggregate of every reaction type and is kept
    next to the per-type ``reaction_counts`` map.
    """

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    community_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("community.id"), nullable=True, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reaction_counts: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class UserFeed(Base):
    """One row per (recipient, post) pair written by the fan-out job."""

    __tablename__ = "user_feed"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_user_feed_user_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
