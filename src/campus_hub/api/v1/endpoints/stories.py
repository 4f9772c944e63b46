# src/campus_hub/api/v1/endpoints/stories.py
"""Story endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.db.time import utcnow
from campus_hub.models import Story
from campus_hub.schemas.campus import StoryCreate, StoryResponse
from campus_hub.services import social

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("/", response_model=list[StoryResponse])
async def active_stories(db: SessionDep) -> list[Story]:
    """Stories that have not expired yet, newest first."""
    return (
        db.query(Story)
        .filter(Story.expires_at > utcnow())
        .order_by(Story.id.desc())
        .all()
    )


@router.post("/", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(body: StoryCreate, current_user: CurrentUserDep, db: SessionDep) -> Story:
    story = run_write(db, lambda: social.create_story(db, current_user, body.content))
    db.refresh(story)
    return story


@router.post("/{story_id}/view")
async def view_story(story_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, bool]:
    recorded = run_write(db, lambda: social.view_story(db, current_user, story_id))
    return {"recorded": recorded}
