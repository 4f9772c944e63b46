# src/campus_hub/models/endorsement.py
"""SQLAlchemy model for skill endorsements between users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_hub.db.session import Base
from campus_hub.db.time import utcnow


class SkillEndorsement(Base):
    """``endorser_id`` vouches for ``skill_name`` on ``user_id``'s profile."""

    __tablename__ = "skill_endorsement"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "skill_name", "endorser_id", name="uq_skill_endorsement_user_skill_endorser"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    endorser_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    # Stored lowercase.
    skill_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
