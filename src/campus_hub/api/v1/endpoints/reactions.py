# src/campus_hub/api/v1/endpoints/reactions.py
"""Reaction endpoints for posts and comments."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.schemas.engagement import ReactionRequest, ReactionResult, ReactionSummary
from campus_hub.services import reactions as reaction_service
from campus_hub.services.errors import CampusError

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("/", response_model=ReactionResult)
async def add_reaction(
    body: ReactionRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Add or change your reaction on a post or comment."""
    return run_write(
        db,
        lambda: reaction_service.add_reaction(
            db, current_user, body.target_id, body.target_type, body.type
        ),
    )


@router.delete("/{target_type}/{target_id}", response_model=ReactionResult)
async def remove_reaction(
    target_type: str,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    return run_write(
        db, lambda: reaction_service.remove_reaction(db, current_user, target_id, target_type)
    )


@router.get("/{target_type}/{target_id}", response_model=ReactionSummary)
async def get_reactions(
    target_type: str,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, Any]:
    """Reaction counts on a target plus the caller's own reaction."""
    try:
        summary = reaction_service.get_reactions(db, target_id, target_type)
        summary["user_reaction"] = reaction_service.get_user_reaction(
            db, current_user, target_id, target_type
        )
    except CampusError as exc:
        raise_http(exc)
    return summary


@router.get("/{target_type}/{target_id}/users")
async def get_reaction_users(
    target_type: str,
    target_id: int,
    db: SessionDep,
    type: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    try:
        return reaction_service.get_reaction_users(db, target_id, target_type, type, limit)
    except CampusError as exc:
        raise_http(exc)
