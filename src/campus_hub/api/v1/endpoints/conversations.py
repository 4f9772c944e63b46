# src/campus_hub/api/v1/endpoints/conversations.py
"""Conversation endpoints; message delivery is handled elsewhere."""

from __future__ import annotations

from fastapi import APIRouter

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Conversation
from campus_hub.schemas.campus import ConversationCreate, ConversationResponse
from campus_hub.services import social

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("/", response_model=ConversationResponse)
async def open_conversation(
    body: ConversationCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Conversation:
    """Return the direct conversation with another user, creating it if needed."""
    conversation = run_write(
        db, lambda: social.get_or_create_conversation(db, current_user, body.user_id)
    )
    db.refresh(conversation)
    return conversation


@router.get("/", response_model=list[ConversationResponse])
async def list_conversations(current_user: CurrentUserDep, db: SessionDep) -> list[Conversation]:
    return social.list_conversations(db, current_user)
