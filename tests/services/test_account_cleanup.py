# mypy: ignore-errors
"""Tests for cascading account deletion."""

from datetime import timedelta

import pytest
from sqlalchemy import or_

from campus_hub.db.time import utcnow
from campus_hub.models import (
    Bookmark,
    Comment,
    Community,
    CommunityMember,
    Follow,
    Hashtag,
    Notification,
    Paper,
    PaperAuthor,
    Post,
    Reaction,
    Repost,
    SkillEndorsement,
    User,
    UserFeed,
)
from campus_hub.services import (
    account_cleanup,
    bookmarks,
    campus,
    comments,
    endorsements,
    follows,
    papers,
    posts,
    reactions,
    reposts,
    social,
)


@pytest.fixture
def busy_account(db_session, scheduler, test_user, other_user):
    """Give ``test_user`` activity touching every table that references users."""
    alice, bob = test_user, other_user
    follows.follow_user(db_session, alice, bob.id)
    follows.follow_user(db_session, bob, alice.id)
    alice_post = posts.create_post(db_session, alice, "Alice was here")
    bob_post = posts.create_post(db_session, bob, "Bob's notes")
    db_session.commit()

    comments.create_comment(db_session, bob, alice_post.id, "On Alice's post")
    comments.create_comment(db_session, alice, bob_post.id, "On Bob's post")
    reactions.add_reaction(db_session, alice, bob_post.id, "post", "like")
    reposts.create_repost(db_session, alice, bob_post.id)
    bookmarks.add_bookmark(db_session, alice, bob_post.id)

    club = campus.create_community(db_session, bob, "chess", "Chess Club")
    owned = campus.create_community(db_session, alice, "alice-fans", "Alice Fans")
    event = campus.create_event(db_session, bob, "Open Mic", utcnow() + timedelta(days=2))
    job = campus.post_job(db_session, bob, "Grader", "CS Department")
    story = social.create_story(db_session, bob, "Look at this")
    poll = social.create_poll(db_session, bob, "Tea or coffee?", ["Tea", "Coffee"])
    db_session.commit()

    campus.join_community(db_session, alice, club.id)
    campus.join_community(db_session, bob, owned.id)
    campus.rsvp_event(db_session, alice, event.id, "going")
    campus.apply_to_job(db_session, alice, job.id)
    social.view_story(db_session, alice, story.id)
    social.vote_poll(db_session, alice, poll.id, "opt_1")
    social.get_or_create_conversation(db_session, alice, bob.id)
    db_session.commit()
    scheduler.drain()

    return {
        "bob_post": bob_post,
        "club": club,
        "owned": owned,
        "event": event,
        "job": job,
        "story": story,
        "poll": poll,
    }


def test_delete_account_removes_every_reference(
    db_session, scheduler, test_user, other_user, busy_account
) -> None:
    alice_id = test_user.id
    account_cleanup.schedule_account_deletion(db_session, test_user)
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    assert db_session.get(User, alice_id) is None
    assert db_session.query(Post).filter_by(author_id=alice_id).count() == 0
    assert db_session.query(Comment).count() == 0
    assert db_session.query(Reaction).filter_by(user_id=alice_id).count() == 0
    assert db_session.query(Repost).filter_by(user_id=alice_id).count() == 0
    assert db_session.query(Bookmark).filter_by(user_id=alice_id).count() == 0
    assert db_session.query(UserFeed).filter_by(user_id=alice_id).count() == 0
    assert db_session.query(CommunityMember).filter_by(user_id=alice_id).count() == 0
    assert (
        db_session.query(Follow)
        .filter(or_(Follow.follower_id == alice_id, Follow.following_id == alice_id))
        .count()
        == 0
    )
    assert (
        db_session.query(Notification)
        .filter(or_(Notification.recipient_id == alice_id, Notification.actor_id == alice_id))
        .count()
        == 0
    )
    assert db_session.get(Community, busy_account["owned"].id).owner_id is None


def test_delete_account_removes_papers_endorsements_and_hashtag_links(
    db_session, scheduler, test_user, other_user
) -> None:
    alice, bob = test_user, other_user
    alice_id = alice.id
    alice.skills = ["Python"]
    bob.skills = ["Rust"]
    db_session.commit()

    own = papers.upload_paper(db_session, alice, "Alice's thesis", "", ["A. Author"], [])
    shared = papers.upload_paper(
        db_session,
        bob,
        "Joint work",
        "",
        ["B. Reader", "A. Author"],
        [],
        linked_user_ids=[alice_id],
    )
    endorsements.endorse_skill(db_session, alice, bob.id, "rust")
    endorsements.endorse_skill(db_session, bob, alice_id, "python")
    posts.create_post(db_session, alice, "Thesis submitted #phdlife")
    posts.create_post(db_session, bob, "Congrats #PhDLife")
    db_session.commit()
    scheduler.drain()
    own_id, shared_id = own.id, shared.id

    account_cleanup.schedule_account_deletion(db_session, alice)
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    assert db_session.get(Paper, own_id) is None
    assert db_session.query(PaperAuthor).filter_by(paper_id=own_id).count() == 0
    assert db_session.query(PaperAuthor).filter_by(user_id=alice_id).count() == 0
    assert [row.user_id for row in db_session.query(PaperAuthor).filter_by(paper_id=shared_id)] == [
        bob.id
    ]
    assert db_session.query(SkillEndorsement).count() == 0
    assert db_session.query(Hashtag).filter_by(tag="phdlife").one().post_count == 1


def test_delete_account_restores_counters_on_the_other_side(
    db_session, scheduler, test_user, other_user, busy_account
) -> None:
    account_cleanup.schedule_account_deletion(db_session, test_user)
    db_session.commit()
    scheduler.drain()
    db_session.expire_all()

    assert other_user.follower_count == 0
    assert other_user.following_count == 0

    bob_post = busy_account["bob_post"]
    assert bob_post.comment_count == 0
    assert bob_post.like_count == 0
    assert bob_post.share_count == 0
    assert busy_account["club"].member_count == 1
    assert busy_account["event"].attendee_count == 1
    assert busy_account["job"].applicant_count == 0
    assert busy_account["story"].view_count == 0
    assert busy_account["poll"].total_votes == 0
    assert [option["vote_count"] for option in busy_account["poll"].options] == [0, 0]


def test_delete_account_skips_missing_user(scheduler) -> None:
    assert account_cleanup.delete_account(scheduler.session_factory, user_id=424242) == {}


def test_failed_step_keeps_the_user(db_session, scheduler, test_user, mocker) -> None:
    def remove_everything(db, user_id):
        raise RuntimeError("disk on fire")

    mocker.patch.object(account_cleanup, "CLEANUP_STEPS", (remove_everything,))

    with pytest.raises(RuntimeError):
        account_cleanup.delete_account(scheduler.session_factory, user_id=test_user.id)

    assert db_session.get(User, test_user.id) is not None


def test_cleanup_steps_run_on_a_thread_pool(mocker) -> None:
    mocker.patch.object(account_cleanup.settings, "account_cleanup_workers", 3)
    seen = []

    def record_step(db, user_id):
        seen.append(user_id)
        return 1

    mocker.patch.object(account_cleanup, "CLEANUP_STEPS", (record_step,))
    factory = mocker.MagicMock()
    factory.return_value.__exit__.return_value = None
    factory.return_value.__enter__.return_value.get.return_value = object()

    assert account_cleanup.delete_account(factory, user_id=7) == {"record_step": 1}
    assert seen == [7]
