"""Stories, polls and conversations."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from campus_hub.db.time import as_utc, utcnow
from campus_hub.models import (
    Conversation,
    ConversationParticipant,
    Poll,
    PollVote,
    Story,
    StoryView,
    User,
)
from campus_hub.services import counters
from campus_hub.services.errors import NotFoundError, ValidationError
from campus_hub.services.scheduler import run_after

STORY_MAX_LENGTH = 500
STORY_LIFETIME = timedelta(hours=24)
POLL_MIN_OPTIONS = 2
POLL_MAX_OPTIONS = 10
POLL_OPTION_MAX_LENGTH = 100


# Stories


def create_story(db: Session, user: User, content: str) -> Story:
    """Publish a story that expires after a day."""
    if not content or not content.strip():
        raise ValidationError("Story content cannot be empty")
    if len(content) > STORY_MAX_LENGTH:
        raise ValidationError(f"Story text must not exceed {STORY_MAX_LENGTH} characters")

    story = Story(
        author_id=user.id,
        content=content.strip(),
        view_count=0,
        expires_at=utcnow() + STORY_LIFETIME,
    )
    db.add(story)
    db.flush()
    return story


def view_story(db: Session, viewer: User, story_id: int) -> bool:
    """Record the first view of a story by ``viewer``.

    Returns True when a new view was recorded. Authors viewing their own
    story are not counted.
    """
    story = db.get(Story, story_id)
    if story is None:
        raise NotFoundError("Story not found")
    if as_utc(story.expires_at) <= utcnow():
        raise ValidationError("Story has expired")
    if story.author_id == viewer.id:
        return False

    seen = (
        db.query(StoryView.id)
        .filter(StoryView.story_id == story_id, StoryView.viewer_id == viewer.id)
        .first()
    )
    if seen is not None:
        return False

    db.add(StoryView(story_id=story_id, viewer_id=viewer.id))
    db.flush()
    run_after(db, 0, counters.update_story_view_count, story_id=story_id, delta=1)
    return True


# Polls


def create_poll(
    db: Session,
    user: User,
    question: str,
    options: list[str],
    ends_at: datetime | None = None,
) -> Poll:
    """Create a poll with between two and ten options."""
    if not question or not question.strip():
        raise ValidationError("Poll question cannot be empty")
    if not POLL_MIN_OPTIONS <= len(options) <= POLL_MAX_OPTIONS:
        raise ValidationError(
            f"A poll must have between {POLL_MIN_OPTIONS} and {POLL_MAX_OPTIONS} options"
        )

    cleaned = []
    for index, text in enumerate(options):
        text = text.strip()
        if not text:
            raise ValidationError("Poll options cannot be empty")
        if len(text) > POLL_OPTION_MAX_LENGTH:
            raise ValidationError(
                f"Poll option must not exceed {POLL_OPTION_MAX_LENGTH} characters"
            )
        cleaned.append({"id": f"opt_{index}", "text": text, "vote_count": 0})

    poll = Poll(
        author_id=user.id,
        question=question.strip(),
        options=cleaned,
        total_votes=0,
        ends_at=ends_at,
    )
    db.add(poll)
    db.flush()
    return poll


def shift_poll_vote(
    poll: Poll, remove_option: str | None = None, add_option: str | None = None
) -> None:
    """Move one vote between options and keep ``total_votes`` in step.

    A retracted vote without a replacement lowers the total; a new vote
    without a previous one raises it. Counts never go below zero.
    """
    options: list[dict[str, Any]] = []
    for option in poll.options:
        option = dict(option)
        if option["id"] == remove_option:
            option["vote_count"] = max(0, option.get("vote_count", 0) - 1)
        if option["id"] == add_option:
            option["vote_count"] = option.get("vote_count", 0) + 1
        options.append(option)
    poll.options = options

    if remove_option is None and add_option is not None:
        poll.total_votes = (poll.total_votes or 0) + 1
    elif remove_option is not None and add_option is None:
        poll.total_votes = max(0, (poll.total_votes or 0) - 1)


def vote_poll(db: Session, user: User, poll_id: int, option_id: str) -> str:
    """Cast or change a vote; returns ``"voted"``, ``"changed"`` or ``"no-change"``."""
    poll = db.get(Poll, poll_id, with_for_update=True)
    if poll is None:
        raise NotFoundError("Poll not found")
    if poll.ends_at is not None and utcnow() > as_utc(poll.ends_at):
        raise ValidationError("This poll has ended")
    if not any(option["id"] == option_id for option in poll.options):
        raise ValidationError("Invalid option")

    existing = (
        db.query(PollVote).filter(PollVote.poll_id == poll_id, PollVote.user_id == user.id).first()
    )
    if existing is not None:
        if existing.option_id == option_id:
            return "no-change"
        shift_poll_vote(poll, remove_option=existing.option_id, add_option=option_id)
        existing.option_id = option_id
        return "changed"

    shift_poll_vote(poll, add_option=option_id)
    db.add(PollVote(poll_id=poll_id, user_id=user.id, option_id=option_id))
    db.flush()
    return "voted"


# Conversations


def get_or_create_conversation(db: Session, user: User, other_user_id: int) -> Conversation:
    """Return the direct conversation between two users, creating it if needed."""
    if other_user_id == user.id:
        raise ValidationError("Cannot start a conversation with yourself")
    if db.get(User, other_user_id) is None:
        raise NotFoundError("User not found")

    mine = {
        conversation_id
        for (conversation_id,) in db.query(ConversationParticipant.conversation_id).filter(
            ConversationParticipant.user_id == user.id
        )
    }
    if mine:
        shared = (
            db.query(Conversation)
            .join(
                ConversationParticipant,
                ConversationParticipant.conversation_id == Conversation.id,
            )
            .filter(
                Conversation.id.in_(mine),
                Conversation.is_group.is_(False),
                ConversationParticipant.user_id == other_user_id,
            )
            .first()
        )
        if shared is not None:
            return shared

    conversation = Conversation(created_by=user.id, is_group=False)
    db.add(conversation)
    db.flush()
    db.add_all(
        [
            ConversationParticipant(conversation_id=conversation.id, user_id=user.id),
            ConversationParticipant(conversation_id=conversation.id, user_id=other_user_id),
        ]
    )
    db.flush()
    return conversation


def list_conversations(db: Session, user: User) -> list[Conversation]:
    """Return the conversations the user participates in, newest first."""
    return (
        db.query(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .filter(ConversationParticipant.user_id == user.id)
        .order_by(Conversation.id.desc())
        .all()
    )
