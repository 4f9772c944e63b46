# mypy: ignore-errors
"""Tests for the follow graph."""

import pytest

from campus_hub.models import Follow, Notification
from campus_hub.services import follows
from campus_hub.services.errors import ConflictError, NotFoundError, ValidationError


def test_follow_updates_both_counters_and_notifies(
    db_session, scheduler, test_user, other_user
) -> None:
    follows.follow_user(db_session, other_user, test_user.id)
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_user)
    db_session.refresh(other_user)
    assert test_user.follower_count == 1
    assert other_user.following_count == 1

    notification = db_session.query(Notification).filter_by(recipient_id=test_user.id).one()
    assert notification.type == "follow"
    assert notification.message == "Bob Reader started following you"
    assert notification.reference_id == str(other_user.id)


def test_follow_rejects_self_missing_and_duplicates(db_session, test_user, other_user) -> None:
    with pytest.raises(ValidationError):
        follows.follow_user(db_session, test_user, test_user.id)
    with pytest.raises(NotFoundError):
        follows.follow_user(db_session, test_user, 424242)

    follows.follow_user(db_session, test_user, other_user.id)
    db_session.commit()
    with pytest.raises(ConflictError):
        follows.follow_user(db_session, test_user, other_user.id)


def test_unfollow_restores_counters(db_session, scheduler, test_user, other_user) -> None:
    follows.follow_user(db_session, other_user, test_user.id)
    db_session.commit()
    scheduler.drain()

    follows.unfollow_user(db_session, other_user, test_user.id)
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_user)
    db_session.refresh(other_user)
    assert test_user.follower_count == 0
    assert other_user.following_count == 0
    assert db_session.query(Follow).count() == 0
    assert not follows.is_following(db_session, other_user.id, test_user.id)


def test_unfollow_when_not_following(db_session, test_user, other_user) -> None:
    with pytest.raises(NotFoundError):
        follows.unfollow_user(db_session, test_user, other_user.id)


def test_followers_are_paginated_newest_first(db_session, make_user, test_user) -> None:
    fans = [make_user(f"Fan {i}") for i in range(3)]
    for fan in fans:
        follows.follow_user(db_session, fan, test_user.id)
    db_session.commit()

    first = follows.get_followers(db_session, test_user.id, limit=2)
    assert [user.id for user in first["users"]] == [fans[2].id, fans[1].id]
    assert first["has_more"] is True

    second = follows.get_followers(db_session, test_user.id, limit=2, cursor=first["next_cursor"])
    assert [user.id for user in second["users"]] == [fans[0].id]
    assert second["has_more"] is False

    following = follows.get_following(db_session, fans[0].id)
    assert [user.id for user in following["users"]] == [test_user.id]
