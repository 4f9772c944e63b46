# mypy: ignore-errors
"""Tests for reaction upserts and reaction counters."""

import pytest

from campus_hub.models import Notification
from campus_hub.services import reactions
from campus_hub.services.errors import NotFoundError, ValidationError


def test_reaction_lifecycle_actions(
    db_session, scheduler, test_post, test_user, other_user
) -> None:
    first = reactions.add_reaction(db_session, other_user, test_post.id, "post", "like")
    same = reactions.add_reaction(db_session, other_user, test_post.id, "post", "like")
    changed = reactions.add_reaction(db_session, other_user, test_post.id, "post", "scholarly")
    db_session.commit()
    scheduler.drain()

    assert first["action"] == "created"
    assert same["action"] == "no-change"
    assert changed["action"] == "updated"

    db_session.refresh(test_post)
    assert test_post.like_count == 1
    assert test_post.reaction_counts["scholarly"] == 1
    assert test_post.reaction_counts["like"] == 0

    # Changing the type neither notifies nor rewards the author again
    assert db_session.query(Notification).count() == 1
    db_session.refresh(test_user)
    assert test_user.reputation == 1


def test_new_reaction_notifies_and_rewards_author(
    db_session, scheduler, test_post, test_user, other_user
) -> None:
    reactions.add_reaction(db_session, other_user, test_post.id, "post", "love")
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_user)
    assert test_user.reputation == 1
    note = db_session.query(Notification).one()
    assert note.recipient_id == test_user.id
    assert note.message.startswith("Bob Reader reacted")
    assert note.message.endswith("to your post")


def test_self_reaction_is_silent(db_session, scheduler, test_post, test_user) -> None:
    reactions.add_reaction(db_session, test_user, test_post.id, "post", "like")
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_user)
    db_session.refresh(test_post)
    assert test_post.like_count == 1
    assert test_user.reputation == 0
    assert db_session.query(Notification).count() == 0


def test_remove_reaction_recounts(db_session, scheduler, test_post, other_user) -> None:
    reactions.add_reaction(db_session, other_user, test_post.id, "post", "laugh")
    db_session.commit()
    scheduler.drain()

    assert reactions.remove_reaction(db_session, other_user, test_post.id, "post") == {
        "success": True
    }
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_post)
    assert test_post.like_count == 0
    assert reactions.remove_reaction(db_session, other_user, test_post.id, "post")["success"] is False


def test_reaction_summary(db_session, test_post, make_user) -> None:
    for reaction_type in ("like", "like", "wow"):
        reactions.add_reaction(db_session, make_user(), test_post.id, "post", reaction_type)
    db_session.commit()

    summary = reactions.get_reactions(db_session, test_post.id, "post")
    assert summary["total"] == 3
    assert summary["top_reactions"][0] == {"type": "like", "count": 2}
    assert len(reactions.get_reaction_users(db_session, test_post.id, "post", "wow")) == 1


def test_reaction_validation(db_session, test_post, test_user) -> None:
    with pytest.raises(ValidationError):
        reactions.add_reaction(db_session, test_user, test_post.id, "post", "angry")
    with pytest.raises(ValidationError):
        reactions.add_reaction(db_session, test_user, test_post.id, "story", "like")
    with pytest.raises(NotFoundError):
        reactions.add_reaction(db_session, test_user, 8888, "comment", "like")


def test_concurrent_duplicate_reaction_falls_back_to_existing_row(
    db_session, scheduler, mocker, test_post, other_user
) -> None:
    reactions.add_reaction(db_session, other_user, test_post.id, "post", "like")
    db_session.commit()
    scheduler.drain()

    # The first lookup misses, as it would for a request racing the insert above
    real_find = reactions._find
    lookups = []

    def stale_then_real(*args):
        lookups.append(args)
        return None if len(lookups) == 1 else real_find(*args)

    mocker.patch.object(reactions, "_find", side_effect=stale_then_real)

    same = reactions.add_reaction(db_session, other_user, test_post.id, "post", "like")
    assert same["action"] == "no-change"

    lookups.clear()
    changed = reactions.add_reaction(db_session, other_user, test_post.id, "post", "love")
    assert changed["action"] == "updated"
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_post)
    assert test_post.like_count == 1
    assert test_post.reaction_counts["love"] == 1
    assert db_session.query(Notification).count() == 1
