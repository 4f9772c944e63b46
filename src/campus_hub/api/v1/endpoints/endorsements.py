# src/campus_hub/api/v1/endpoints/endorsements.py
"""Skill endorsement endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import SkillEndorsement
from campus_hub.schemas.user import (
    EndorsementRequest,
    EndorsementResponse,
    EndorsementsResponse,
)
from campus_hub.services import endorsements as endorsement_service

router = APIRouter(prefix="/users", tags=["endorsements"])


@router.get("/me/endorsements/given", response_model=list[EndorsementResponse])
async def my_endorsements(current_user: CurrentUserDep, db: SessionDep) -> list[SkillEndorsement]:
    return endorsement_service.get_my_endorsements(db, current_user)


@router.post(
    "/{user_id}/endorsements",
    response_model=EndorsementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def endorse_skill(
    user_id: int, request: EndorsementRequest, current_user: CurrentUserDep, db: SessionDep
) -> SkillEndorsement:
    """Endorse a skill on another user's profile."""
    endorsement = run_write(
        db,
        lambda: endorsement_service.endorse_skill(db, current_user, user_id, request.skill_name),
    )
    db.refresh(endorsement)
    return endorsement


@router.delete("/{user_id}/endorsements/{skill_name}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_endorsement(
    user_id: int, skill_name: str, current_user: CurrentUserDep, db: SessionDep
) -> None:
    run_write(
        db, lambda: endorsement_service.remove_endorsement(db, current_user, user_id, skill_name)
    )


@router.get("/{user_id}/endorsements", response_model=EndorsementsResponse)
async def endorsements(
    user_id: int, current_user: CurrentUserDep, db: SessionDep
) -> dict[str, Any]:
    """Endorsement counts for each skill on a profile."""
    return endorsement_service.get_endorsements(db, user_id, viewer_id=current_user.id)
