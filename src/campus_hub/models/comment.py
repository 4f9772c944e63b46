# src/campus_hub/models/comment.py
"""SQLAlchemy model for threaded comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow

MAX_COMMENT_DEPTH = 5


class Comment(Base):
    """Comment on a post; replies point at their parent through ``parent_comment_id``."""

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id"), nullable=False, index=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    parent_comment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comment.id"), nullable=True, index=True
    )
    # 0 for top-level comments.
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reaction_counts: Mapped[dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
