"""Account deletion as a set of independent, idempotent cleanup steps.

Every step opens its own session and commits on its own, so a crash part way
through leaves a partially cleaned account that a second run finishes. The
user row is only removed after every step has succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from campus_hub.core.settings import settings
from campus_hub.models import (
    Achievement,
    Bookmark,
    Comment,
    Community,
    CommunityMember,
    Conversation,
    ConversationParticipant,
    Event,
    EventRSVP,
    Follow,
    Job,
    JobApplication,
    Notification,
    Paper,
    PaperAuthor,
    Poll,
    PollVote,
    Post,
    Reaction,
    Repost,
    SkillEndorsement,
    Story,
    StoryView,
    User,
    UserFeed,
)
from campus_hub.services import counters
from campus_hub.services.comments import purge_comment_subtree
from campus_hub.services.papers import purge_paper
from campus_hub.services.posts import purge_post
from campus_hub.services.scheduler import SessionFactory, action, run_after
from campus_hub.services.social import shift_poll_vote

# Configure logger for this module
logger = logging.getLogger(__name__)

CleanupStep = Callable[[Session, int], int]


def remove_posts(db: Session, user_id: int) -> int:
    """Purge every post the user wrote."""
    posts = db.query(Post).filter(Post.author_id == user_id).all()
    for post in posts:
        purge_post(db, post)
    return len(posts)


def remove_comments(db: Session, user_id: int) -> int:
    """Purge the user's remaining comments together with their reply subtrees."""
    removed = 0
    while True:
        comment = (
            db.query(Comment).filter(Comment.author_id == user_id).order_by(Comment.depth).first()
        )
        if comment is None:
            return removed
        removed += purge_comment_subtree(db, comment)
        db.flush()


def remove_reactions(db: Session, user_id: int) -> int:
    """Delete the user's reactions and recount every target they touched."""
    targets = {
        (target_id, target_type)
        for target_id, target_type in db.query(Reaction.target_id, Reaction.target_type).filter(
            Reaction.user_id == user_id
        )
    }
    db.query(Reaction).filter(Reaction.user_id == user_id).delete(synchronize_session="fetch")
    for target_id, target_type in sorted(targets):
        run_after(
            db, 0, counters.recount_reactions, target_id=target_id, target_type=target_type
        )
    return len(targets)


def remove_reposts(db: Session, user_id: int) -> int:
    """Delete the user's reposts and give the shares back to the originals."""
    reposts = db.query(Repost).filter(Repost.user_id == user_id).all()
    for repost in reposts:
        run_after(
            db, 0, counters.decrement_post_counts, post_id=repost.original_post_id, share_count=1
        )
        db.delete(repost)
    return len(reposts)


def remove_bookmarks(db: Session, user_id: int) -> int:
    return db.query(Bookmark).filter(Bookmark.user_id == user_id).delete(
        synchronize_session="fetch"
    )


def remove_follows(db: Session, user_id: int) -> int:
    """Delete follow edges in both directions and fix the other side's counts."""
    edges = (
        db.query(Follow)
        .filter(or_(Follow.follower_id == user_id, Follow.following_id == user_id))
        .all()
    )
    for edge in edges:
        if edge.follower_id == user_id:
            run_after(
                db,
                0,
                counters.update_user_follow_counts,
                user_id=edge.following_id,
                follower_delta=-1,
            )
        else:
            run_after(
                db,
                0,
                counters.update_user_follow_counts,
                user_id=edge.follower_id,
                following_delta=-1,
            )
        db.delete(edge)
    return len(edges)


def remove_notifications(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(or_(Notification.recipient_id == user_id, Notification.actor_id == user_id))
        .delete(synchronize_session="fetch")
    )


def remove_memberships(db: Session, user_id: int) -> int:
    """Leave every community and release ownership of the ones the user ran."""
    memberships = db.query(CommunityMember).filter(CommunityMember.user_id == user_id).all()
    for membership in memberships:
        if membership.role != "pending":
            run_after(
                db,
                0,
                counters.update_community_member_count,
                community_id=membership.community_id,
                delta=-1,
            )
        db.delete(membership)
    db.execute(
        update(Community).where(Community.owner_id == user_id).values(owner_id=None)
    )
    return len(memberships)


def remove_stories(db: Session, user_id: int) -> int:
    """Delete the user's stories and the views they left on other stories."""
    story_ids = [sid for (sid,) in db.query(Story.id).filter(Story.author_id == user_id)]
    if story_ids:
        db.query(StoryView).filter(StoryView.story_id.in_(story_ids)).delete(
            synchronize_session="fetch"
        )
        db.query(Story).filter(Story.id.in_(story_ids)).delete(synchronize_session="fetch")

    views = db.query(StoryView).filter(StoryView.viewer_id == user_id).all()
    for view in views:
        run_after(db, 0, counters.update_story_view_count, story_id=view.story_id, delta=-1)
        db.delete(view)
    return len(story_ids) + len(views)


def remove_polls(db: Session, user_id: int) -> int:
    """Delete the user's polls and retract their votes on other polls."""
    poll_ids = [pid for (pid,) in db.query(Poll.id).filter(Poll.author_id == user_id)]
    if poll_ids:
        db.query(PollVote).filter(PollVote.poll_id.in_(poll_ids)).delete(
            synchronize_session="fetch"
        )
        db.query(Poll).filter(Poll.id.in_(poll_ids)).delete(synchronize_session="fetch")

    votes = db.query(PollVote).filter(PollVote.user_id == user_id).all()
    for vote in votes:
        poll = db.get(Poll, vote.poll_id, with_for_update=True)
        if poll is not None:
            shift_poll_vote(poll, remove_option=vote.option_id)
        db.delete(vote)
    return len(poll_ids) + len(votes)


def remove_conversations(db: Session, user_id: int) -> int:
    removed = (
        db.query(ConversationParticipant)
        .filter(ConversationParticipant.user_id == user_id)
        .delete(synchronize_session="fetch")
    )
    db.execute(
        update(Conversation).where(Conversation.created_by == user_id).values(created_by=None)
    )
    return removed


def remove_campus_activity(db: Session, user_id: int) -> int:
    """Withdraw RSVPs and job applications; orphan organized events and posted jobs."""
    rsvps = db.query(EventRSVP).filter(EventRSVP.user_id == user_id).all()
    for rsvp in rsvps:
        if rsvp.status == "going":
            run_after(
                db, 0, counters.update_event_attendee_count, event_id=rsvp.event_id, delta=-1
            )
        db.delete(rsvp)

    applications = db.query(JobApplication).filter(JobApplication.user_id == user_id).all()
    for application in applications:
        run_after(
            db, 0, counters.update_job_applicant_count, job_id=application.job_id, delta=-1
        )
        db.delete(application)

    db.execute(update(Event).where(Event.organizer_id == user_id).values(organizer_id=None))
    db.execute(update(Job).where(Job.posted_by == user_id).values(posted_by=None))
    return len(rsvps) + len(applications)


def remove_papers(db: Session, user_id: int) -> int:
    """Delete the user's papers and unlink them from papers others uploaded."""
    papers = db.query(Paper).filter(Paper.uploaded_by == user_id).all()
    for paper in papers:
        purge_paper(db, paper)
    unlinked = (
        db.query(PaperAuthor)
        .filter(PaperAuthor.user_id == user_id)
        .delete(synchronize_session="fetch")
    )
    return len(papers) + unlinked


def remove_endorsements(db: Session, user_id: int) -> int:
    """Delete endorsements the user gave and received."""
    return (
        db.query(SkillEndorsement)
        .filter(
            or_(SkillEndorsement.user_id == user_id, SkillEndorsement.endorser_id == user_id)
        )
        .delete(synchronize_session="fetch")
    )


CLEANUP_STEPS: tuple[CleanupStep, ...] = (
    remove_posts,
    remove_comments,
    remove_reactions,
    remove_reposts,
    remove_bookmarks,
    remove_follows,
    remove_notifications,
    remove_memberships,
    remove_stories,
    remove_polls,
    remove_conversations,
    remove_campus_activity,
    remove_papers,
    remove_endorsements,
)


def _run_step(session_factory: SessionFactory, step: CleanupStep, user_id: int) -> int:
    with session_factory() as db:
        try:
            removed = step(db, user_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
    logger.debug("Cleanup step %s removed %d rows for user %s", step.__name__, removed, user_id)
    return removed


@action
def delete_account(session_factory: SessionFactory, user_id: int) -> dict[str, int]:
    """Remove a user and everything that references them.

    Steps run on a pool of ``ACCOUNT_CLEANUP_WORKERS`` threads. If any step
    fails the user row is kept and the error propagates to the scheduler.

    Returns:
        Rows removed per step.
    """
    with session_factory() as db:
        if db.get(User, user_id) is None:
            logger.info("User %s already deleted; skipping cleanup", user_id)
            return {}

    workers = max(1, settings.account_cleanup_workers)
    if workers == 1:
        results = {
            step.__name__: _run_step(session_factory, step, user_id) for step in CLEANUP_STEPS
        }
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="account-cleanup") as pool:
            futures = {
                step.__name__: pool.submit(_run_step, session_factory, step, user_id)
                for step in CLEANUP_STEPS
            }
            results = {name: future.result() for name, future in futures.items()}

    with session_factory() as db:
        try:
            db.query(UserFeed).filter(UserFeed.user_id == user_id).delete(
                synchronize_session="fetch"
            )
            db.query(Achievement).filter(Achievement.user_id == user_id).delete(
                synchronize_session="fetch"
            )
            user = db.get(User, user_id)
            if user is not None:
                db.delete(user)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Deleted account %s: %s", user_id, results)
    return results


def schedule_account_deletion(db: Session, user: User) -> None:
    """Stage the cleanup of ``user`` to run once the caller commits."""
    run_after(db, 0, delete_account, user_id=user.id)
