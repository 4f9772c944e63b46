# src/campus_hub/models/repost.py
"""SQLAlchemy models for reposts and bookmarks."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow

DEFAULT_COLLECTION = "Saved"


class Repost(Base):
    """A user sharing someone else's post, optionally with a quote."""

    __tablename__ = "repost"
    __table_args__ = (
        UniqueConstraint("user_id", "original_post_id", name="uq_repost_user_post"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    original_post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id"), nullable=False, index=True
    )
    quote_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Bookmark(Base):
    """A post saved into one of the user's named collections."""

    __tablename__ = "bookmark"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_bookmark_user_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id"), nullable=False, index=True
    )
    collection_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=DEFAULT_COLLECTION
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
