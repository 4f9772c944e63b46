# src/campus_hub/models/reaction.py
"""SQLAlchemy model for reactions on posts and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow

REACTION_TYPES = ("like", "love", "laugh", "wow", "sad", "scholarly")
TARGET_TYPES = ("post", "comment")


class Reaction(Base):
    """A single user's reaction on a post or comment.

    ``target_id`` is polymorphic over ``target_type`` and has no foreign key.
    """

    __tablename__ = "reaction"
    __table_args__ = (
        UniqueConstraint("user_id", "target_id", "target_type", name="uq_reaction_user_target"),
        Index("ix_reaction_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
