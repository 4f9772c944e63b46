# src/campus_hub/models/hashtag.py
"""SQLAlchemy models for hashtags and their links to posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow


class Hashtag(Base):
    """A normalized tag with its denormalized usage statistics.

    ``post_count`` follows the ``post_hashtag`` rows and ``trending_score`` is
    recomputed periodically by :func:`update_trending_scores`.
    """

    __tablename__ = "hashtag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Lowercase, without the leading '#'.
    tag: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    trending_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_used_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )


class PostHashtag(Base):
    __tablename__ = "post_hashtag"
    __table_args__ = (
        UniqueConstraint("post_id", "hashtag_id", name="uq_post_hashtag"),
        Index("ix_post_hashtag_hashtag_created", "hashtag_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id"), nullable=False, index=True
    )
    hashtag_id: Mapped[int] = mapped_column(Integer, ForeignKey("hashtag.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
