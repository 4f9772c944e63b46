# src/campus_hub/api/v1/endpoints/gamification.py
"""Reputation, achievements and leaderboard endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep
from campus_hub.schemas.engagement import (
    AchievementOverview,
    LeaderboardEntry,
    ReputationProgress,
)
from campus_hub.services import gamification

router = APIRouter(prefix="/gamification", tags=["gamification"])


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def leaderboard(
    db: SessionDep,
    university: str | None = None,
    limit: int = Query(default=gamification.DEFAULT_LEADERBOARD_SIZE, ge=1, le=100),
) -> list[dict[str, Any]]:
    return gamification.get_leaderboard(db, university, limit)


@router.get("/me", response_model=ReputationProgress)
async def my_reputation(current_user: CurrentUserDep) -> dict[str, int]:
    return gamification.get_my_reputation(current_user)


@router.get("/achievements/{user_id}", response_model=AchievementOverview)
async def achievements(user_id: int, db: SessionDep) -> dict[str, Any]:
    """Earned badges and the full catalogue for a user."""
    return gamification.get_achievements(db, user_id)
