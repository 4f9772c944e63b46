# mypy: ignore-errors
"""Tests for hashtag links, post counts and trending scores."""

from datetime import timedelta

from campus_hub.db.time import utcnow
from campus_hub.models import Hashtag, PostHashtag
from campus_hub.services import hashtags, posts


def _tag(db_session, name):
    return db_session.query(Hashtag).filter_by(tag=name).one()


def test_extract_hashtags_normalizes_and_dedupes() -> None:
    content = "Reading group #ML tonight, bring snacks #ml #Deep_Learning and #42!"
    assert hashtags.extract_hashtags(content) == ["ml", "deep_learning", "42"]
    assert hashtags.extract_hashtags("no tags here, just # spaces") == []
    assert hashtags.normalize_hashtag("  #Robotics ") == "robotics"


def test_post_creation_links_hashtags_and_counts_posts(
    db_session, scheduler, test_user, other_user
) -> None:
    first = posts.create_post(db_session, test_user, "Kickoff #hackathon #AI")
    posts.create_post(db_session, other_user, "Team forming for #Hackathon")
    db_session.commit()

    assert _tag(db_session, "hackathon").post_count == 0
    scheduler.drain()

    db_session.expire_all()
    assert _tag(db_session, "hackathon").post_count == 2
    assert _tag(db_session, "ai").post_count == 1
    assert db_session.query(PostHashtag).filter_by(post_id=first.id).count() == 2


def test_linking_twice_is_idempotent(db_session, scheduler, test_post) -> None:
    assert hashtags.link_hashtags_to_post(db_session, test_post.id, "#once") == ["once"]
    assert hashtags.link_hashtags_to_post(db_session, test_post.id, "#once again") == []
    db_session.commit()
    scheduler.drain()

    db_session.expire_all()
    assert _tag(db_session, "once").post_count == 1


def test_deleting_post_decrements_hashtag(db_session, scheduler, test_user) -> None:
    post = posts.create_post(db_session, test_user, "Temporary #draft")
    db_session.commit()
    scheduler.drain()

    removed = posts.delete_post(db_session, test_user, post.id)
    db_session.commit()
    scheduler.drain()

    assert removed["hashtags"] == 1
    db_session.expire_all()
    assert _tag(db_session, "draft").post_count == 0
    assert db_session.query(PostHashtag).count() == 0
    assert hashtags.get_trending(db_session) == []


def test_trending_orders_recent_tags_by_post_count(
    db_session, scheduler, test_user, other_user
) -> None:
    posts.create_post(db_session, test_user, "#exams #library")
    posts.create_post(db_session, other_user, "#exams again")
    posts.create_post(db_session, other_user, "#oldnews")
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    stale = _tag(db_session, "oldnews")
    stale.last_used_at = utcnow() - timedelta(days=2)
    db_session.commit()

    trending = hashtags.get_trending(db_session, limit=10)
    assert [item["tag"] for item in trending] == ["exams", "library"]
    assert trending[0]["post_count"] == 2
    assert [item["tag"] for item in hashtags.get_trending(db_session, limit=1)] == ["exams"]


def test_search_and_stats(db_session, scheduler, test_user) -> None:
    posts.create_post(db_session, test_user, "#robotics #robots #rust")
    posts.create_post(db_session, test_user, "#robots")
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    assert [item["tag"] for item in hashtags.search_hashtags(db_session, "#ROB")] == [
        "robots",
        "robotics",
    ]
    assert hashtags.search_hashtags(db_session, "  ") == []
    assert hashtags.get_hashtag_stats(db_session, "Robots")["post_count"] == 2
    assert hashtags.get_hashtag_stats(db_session, "nothing") is None


def test_posts_by_hashtag_are_paginated(db_session, scheduler, test_user, other_user) -> None:
    created = [
        posts.create_post(db_session, test_user, f"Update {n} #thesis") for n in range(3)
    ]
    posts.create_post(db_session, other_user, "Unrelated #other")
    db_session.commit()
    scheduler.drain()

    page = hashtags.get_posts_by_hashtag(db_session, "#Thesis", limit=2)
    assert [item["post"].id for item in page["items"]] == [created[2].id, created[1].id]
    assert page["has_more"] is True
    assert page["hashtag"]["tag"] == "thesis"

    rest = hashtags.get_posts_by_hashtag(
        db_session, "thesis", limit=2, cursor=page["next_cursor"]
    )
    assert [item["post"].id for item in rest["items"]] == [created[0].id]
    assert rest["has_more"] is False

    missing = hashtags.get_posts_by_hashtag(db_session, "unknown")
    assert missing == {"hashtag": None, "items": [], "has_more": False, "next_cursor": None}


def test_update_trending_scores(db_session, scheduler, test_user) -> None:
    posts.create_post(db_session, test_user, "#fresh")
    posts.create_post(db_session, test_user, "#fresh #stale")
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    stale = _tag(db_session, "stale")
    stale.last_used_at = utcnow() - timedelta(days=8)
    stale.trending_score = 5.0
    db_session.commit()

    assert hashtags.update_trending_scores(db_session) == 1
    db_session.commit()

    # Two posts used just now, both linked within the last day
    assert _tag(db_session, "fresh").trending_score == 6.0
    assert _tag(db_session, "stale").trending_score == 0.0


def test_refresh_reschedules_itself(db_session, scheduler, mocker, test_user) -> None:
    update = mocker.patch.object(hashtags, "update_trending_scores", return_value=0)

    hashtags.refresh_trending_scores(scheduler.session_factory)

    assert scheduler.pending() == 1
    update.assert_called_once()
