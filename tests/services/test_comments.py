# mypy: ignore-errors
"""Tests for threaded comments and their counters."""

import pytest

from campus_hub.models import Comment, Notification, Reaction
from campus_hub.models.comment import MAX_COMMENT_DEPTH
from campus_hub.services import comments, reactions
from campus_hub.services.errors import AuthorizationError, NotFoundError, ValidationError


def test_comment_increments_post_count_and_notifies_author(
    db_session, scheduler, test_post, other_user
) -> None:
    comments.create_comment(db_session, other_user, test_post.id, "Great read")
    db_session.commit()
    scheduler.drain()

    db_session.refresh(test_post)
    assert test_post.comment_count == 1
    note = db_session.query(Notification).filter_by(recipient_id=test_post.author_id).one()
    assert note.type == "comment"
    assert note.message == "Bob Reader commented on your post"
    assert note.reference_id == str(test_post.id)


def test_reply_updates_parent_and_notifies_parent_author(
    db_session, scheduler, test_post, test_user, other_user
) -> None:
    parent = comments.create_comment(db_session, test_user, test_post.id, "Opening thought")
    reply = comments.create_comment(db_session, other_user, test_post.id, "Agreed", parent.id)
    db_session.commit()
    scheduler.drain()

    db_session.refresh(parent)
    db_session.refresh(test_post)
    assert reply.depth == 1
    assert parent.reply_count == 1
    assert test_post.comment_count == 2
    reply_note = db_session.query(Notification).filter_by(type="reply").one()
    assert reply_note.recipient_id == test_user.id
    assert reply_note.message == "Bob Reader replied to your comment"


def test_reply_depth_is_limited(db_session, test_post, test_user) -> None:
    parent = comments.create_comment(db_session, test_user, test_post.id, "level 0")
    for level in range(1, MAX_COMMENT_DEPTH + 1):
        parent = comments.create_comment(
            db_session, test_user, test_post.id, f"level {level}", parent.id
        )

    with pytest.raises(ValidationError):
        comments.create_comment(db_session, test_user, test_post.id, "too deep", parent.id)


def test_comment_rejects_bad_input(db_session, test_post, test_user, make_user) -> None:
    with pytest.raises(ValidationError):
        comments.create_comment(db_session, test_user, test_post.id, "  ")
    with pytest.raises(NotFoundError):
        comments.create_comment(db_session, test_user, 9999, "orphan")
    with pytest.raises(NotFoundError):
        comments.create_comment(db_session, test_user, test_post.id, "reply", 9999)


def test_delete_comment_removes_subtree(
    db_session, scheduler, test_post, test_user, other_user
) -> None:
    top = comments.create_comment(db_session, test_user, test_post.id, "top")
    doomed = comments.create_comment(db_session, other_user, test_post.id, "mid", top.id)
    leaf = comments.create_comment(db_session, test_user, test_post.id, "leaf", doomed.id)
    reactions.add_reaction(db_session, test_user, leaf.id, "comment", "wow")
    db_session.commit()
    scheduler.drain()

    removed = comments.delete_comment(db_session, other_user, doomed.id)
    db_session.commit()
    scheduler.drain()

    db_session.refresh(top)
    db_session.refresh(test_post)
    assert removed == 2
    assert [c.id for c in db_session.query(Comment)] == [top.id]
    assert top.reply_count == 0
    assert test_post.comment_count == 1
    assert db_session.query(Reaction).count() == 0


def test_delete_comment_requires_author(db_session, test_post, test_user, other_user) -> None:
    comment = comments.create_comment(db_session, test_user, test_post.id, "mine")
    with pytest.raises(AuthorizationError):
        comments.delete_comment(db_session, other_user, comment.id)
    with pytest.raises(NotFoundError):
        comments.delete_comment(db_session, other_user, 4242)


def test_comment_list_is_oldest_first(db_session, test_post, test_user, other_user) -> None:
    first = comments.create_comment(db_session, test_user, test_post.id, "first")
    second = comments.create_comment(db_session, other_user, test_post.id, "second")
    db_session.commit()

    listed = comments.get_post_comments(db_session, test_post.id)
    assert [item["comment"].id for item in listed] == [first.id, second.id]
    assert listed[1]["author"].name == "Bob Reader"
