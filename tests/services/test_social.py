# mypy: ignore-errors
"""Tests for stories, polls and conversations."""

from datetime import timedelta

import pytest

from campus_hub.db.time import utcnow
from campus_hub.models import ConversationParticipant
from campus_hub.services import social
from campus_hub.services.errors import NotFoundError, ValidationError


def test_story_views_are_counted_once(db_session, scheduler, test_user, other_user) -> None:
    story = social.create_story(db_session, test_user, "Library is packed today")
    db_session.commit()

    assert social.view_story(db_session, other_user, story.id) is True
    assert social.view_story(db_session, other_user, story.id) is False
    assert social.view_story(db_session, test_user, story.id) is False
    db_session.commit()
    scheduler.drain()

    db_session.refresh(story)
    assert story.view_count == 1


def test_expired_story_cannot_be_viewed(db_session, test_user, other_user) -> None:
    story = social.create_story(db_session, test_user, "Old news")
    story.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()

    with pytest.raises(ValidationError):
        social.view_story(db_session, other_user, story.id)
    with pytest.raises(NotFoundError):
        social.view_story(db_session, other_user, 404)


def test_poll_vote_moves_between_options(db_session, test_user, other_user) -> None:
    poll = social.create_poll(db_session, test_user, "Best study spot?", ["Library", "Cafe"])
    db_session.commit()

    assert social.vote_poll(db_session, other_user, poll.id, "opt_0") == "voted"
    assert social.vote_poll(db_session, test_user, poll.id, "opt_0") == "voted"
    db_session.commit()
    assert social.vote_poll(db_session, other_user, poll.id, "opt_0") == "no-change"
    assert social.vote_poll(db_session, other_user, poll.id, "opt_1") == "changed"
    db_session.commit()

    db_session.refresh(poll)
    assert poll.total_votes == 2
    assert [option["vote_count"] for option in poll.options] == [1, 1]


def test_poll_validation(db_session, test_user) -> None:
    with pytest.raises(ValidationError):
        social.create_poll(db_session, test_user, "Lonely?", ["Yes"])
    with pytest.raises(ValidationError):
        social.create_poll(db_session, test_user, "Too many?", [str(i) for i in range(11)])

    poll = social.create_poll(
        db_session, test_user, "Closed?", ["a", "b"], ends_at=utcnow() - timedelta(days=1)
    )
    db_session.commit()
    with pytest.raises(ValidationError):
        social.vote_poll(db_session, test_user, poll.id, "opt_0")


def test_poll_rejects_unknown_option(db_session, test_user) -> None:
    poll = social.create_poll(db_session, test_user, "Pick one", ["a", "b"])
    db_session.commit()
    with pytest.raises(ValidationError):
        social.vote_poll(db_session, test_user, poll.id, "opt_9")


def test_shift_poll_vote_floors_at_zero(db_session, test_user) -> None:
    poll = social.create_poll(db_session, test_user, "Floor?", ["a", "b"])
    social.shift_poll_vote(poll, remove_option="opt_0")
    assert poll.options[0]["vote_count"] == 0
    assert poll.total_votes == 0


def test_conversation_is_reused(db_session, test_user, other_user) -> None:
    first = social.get_or_create_conversation(db_session, test_user, other_user.id)
    db_session.commit()
    again = social.get_or_create_conversation(db_session, other_user, test_user.id)

    assert again.id == first.id
    assert db_session.query(ConversationParticipant).count() == 2
    assert [c.id for c in social.list_conversations(db_session, other_user)] == [first.id]

    with pytest.raises(ValidationError):
        social.get_or_create_conversation(db_session, test_user, test_user.id)
    with pytest.raises(NotFoundError):
        social.get_or_create_conversation(db_session, test_user, 999)
