# src/campus_hub/api/v1/endpoints/polls.py
"""Poll endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Poll
from campus_hub.schemas.campus import PollCreate, PollResponse, PollVoteRequest
from campus_hub.services import social

router = APIRouter(prefix="/polls", tags=["polls"])


@router.post("/", response_model=PollResponse, status_code=status.HTTP_201_CREATED)
async def create_poll(body: PollCreate, current_user: CurrentUserDep, db: SessionDep) -> Poll:
    poll = run_write(
        db,
        lambda: social.create_poll(db, current_user, body.question, body.options, body.ends_at),
    )
    db.refresh(poll)
    return poll


@router.get("/{poll_id}", response_model=PollResponse)
async def get_poll(poll_id: int, db: SessionDep) -> Poll:
    poll = db.get(Poll, poll_id)
    if not poll:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Poll not found")
    return poll


@router.post("/{poll_id}/vote")
async def vote(
    poll_id: int,
    body: PollVoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Cast or change your vote."""
    result = run_write(db, lambda: social.vote_poll(db, current_user, poll_id, body.option_id))
    return {"status": result}
