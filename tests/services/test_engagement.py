# mypy: ignore-errors
"""Tests for reposts, bookmarks and gamification."""

import pytest

from campus_hub.models import Achievement
from campus_hub.services import bookmarks, gamification, posts, reposts
from campus_hub.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_repost_updates_share_count(db_session, scheduler, test_post, other_user) -> None:
    repost = reposts.create_repost(db_session, other_user, test_post.id, "Worth reading")
    db_session.commit()
    scheduler.drain()
    db_session.refresh(test_post)
    assert test_post.share_count == 1
    assert reposts.has_user_reposted(db_session, other_user, test_post.id)

    reposts.delete_repost(db_session, other_user, repost.id)
    db_session.commit()
    scheduler.drain()
    db_session.refresh(test_post)
    assert test_post.share_count == 0


def test_repost_rules(db_session, test_post, test_user, other_user, make_user) -> None:
    with pytest.raises(ValidationError):
        reposts.create_repost(db_session, test_user, test_post.id)
    with pytest.raises(NotFoundError):
        reposts.create_repost(db_session, other_user, 31337)
    with pytest.raises(ValidationError):
        reposts.create_repost(db_session, other_user, test_post.id, "   ")

    repost = reposts.create_repost(db_session, other_user, test_post.id)
    with pytest.raises(ConflictError):
        reposts.create_repost(db_session, other_user, test_post.id)
    with pytest.raises(AuthorizationError):
        reposts.delete_repost(db_session, make_user(), repost.id)


def test_user_reposts_skip_deleted_posts(db_session, test_user, other_user) -> None:
    kept = posts.create_post(db_session, test_user, "kept")
    gone = posts.create_post(db_session, test_user, "gone")
    reposts.create_repost(db_session, other_user, kept.id)
    reposts.create_repost(db_session, other_user, gone.id)
    db_session.commit()

    db_session.delete(gone)
    db_session.commit()

    listed = reposts.get_user_reposts(db_session, other_user.id)
    assert [item["post"].id for item in listed] == [kept.id]


def test_bookmark_collections(db_session, test_post, test_user) -> None:
    created = bookmarks.add_bookmark(db_session, test_user, test_post.id)
    assert created["status"] == "created"
    assert created["bookmark"].collection_name == "Saved"
    assert bookmarks.add_bookmark(db_session, test_user, test_post.id)["status"] == "already-exists"
    moved = bookmarks.add_bookmark(db_session, test_user, test_post.id, "Thesis")
    assert moved["status"] == "updated"
    db_session.commit()

    assert bookmarks.get_collections(db_session, test_user) == [{"name": "Thesis", "count": 1}]
    page = bookmarks.get_bookmarks(db_session, test_user, collection_name="Thesis")
    assert [item["post"].id for item in page["items"]] == [test_post.id]

    bookmarks.remove_bookmark(db_session, test_user, test_post.id)
    db_session.commit()
    assert not bookmarks.is_bookmarked(db_session, test_user, test_post.id)
    with pytest.raises(NotFoundError):
        bookmarks.remove_bookmark(db_session, test_user, test_post.id)


@pytest.mark.parametrize(
    ("reputation", "level"),
    [(-5, 1), (0, 1), (39, 1), (40, 2), (90, 3), (1000, 10)],
)
def test_calculate_level(reputation, level) -> None:
    assert gamification.calculate_level(reputation) == level


def test_award_reputation_updates_level(db_session, test_user) -> None:
    result = gamification.award_reputation(db_session, test_user.id, "custom", amount=250)
    assert result == {"reputation": 250, "level": 5}
    assert gamification.award_reputation(db_session, test_user.id, "unknown") is None


def test_check_achievements_awards_once(db_session, test_user) -> None:
    gamification.award_reputation(db_session, test_user.id, "custom", amount=120)
    posts.create_post(db_session, test_user, "first!")
    db_session.flush()

    assert set(gamification.check_achievements(db_session, test_user.id)) == {
        "first_post",
        "contributor",
    }
    db_session.flush()
    assert gamification.check_achievements(db_session, test_user.id) == []
    assert db_session.query(Achievement).filter_by(user_id=test_user.id).count() == 2


def test_leaderboard_and_progress(db_session, make_user) -> None:
    low = make_user("Low", reputation=10)
    high = make_user("High", reputation=400, level=6, university="State University")

    board = gamification.get_leaderboard(db_session)
    assert [entry["id"] for entry in board[:2]] == [high.id, low.id]
    assert board[0]["rank"] == 1
    assert [e["id"] for e in gamification.get_leaderboard(db_session, "state")] == [high.id]

    progress = gamification.get_my_reputation(high)
    assert progress["rep_for_next_level"] == 490
    assert progress["progress"] == 82
