# mypy: ignore-errors
"""Tests for communities, events and job applications."""

from datetime import timedelta

import pytest

from campus_hub.db.time import utcnow
from campus_hub.services import campus
from campus_hub.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def public_community(db_session, test_user):
    community = campus.create_community(db_session, test_user, "robotics", "Robotics Club")
    db_session.commit()
    return community


def test_create_community_validation(db_session, test_user, public_community) -> None:
    assert public_community.member_count == 1
    with pytest.raises(ValidationError):
        campus.create_community(db_session, test_user, "ab", "ab")
    with pytest.raises(ValidationError):
        campus.create_community(db_session, test_user, "secret", "Secret Society", type="hidden")
    with pytest.raises(ConflictError):
        campus.create_community(db_session, test_user, "robotics", "Robotics Again")


def test_join_and_leave_public_community(
    db_session, scheduler, public_community, other_user
) -> None:
    assert campus.join_community(db_session, other_user, public_community.id) == "joined"
    db_session.commit()
    scheduler.drain()
    db_session.refresh(public_community)
    assert public_community.member_count == 2

    with pytest.raises(ConflictError):
        campus.join_community(db_session, other_user, public_community.id)

    campus.leave_community(db_session, other_user, public_community.id)
    db_session.commit()
    scheduler.drain()
    db_session.refresh(public_community)
    assert public_community.member_count == 1


def test_private_community_counts_only_approved_members(
    db_session, scheduler, test_user, other_user, make_user
) -> None:
    community = campus.create_community(
        db_session, test_user, "grad-lounge", "Grad Lounge", type="private"
    )
    db_session.commit()

    assert campus.join_community(db_session, other_user, community.id) == "pending"
    db_session.commit()
    scheduler.drain()
    db_session.refresh(community)
    assert community.member_count == 1

    with pytest.raises(AuthorizationError):
        campus.approve_join_request(db_session, make_user(), community.id, other_user.id)

    campus.approve_join_request(db_session, test_user, community.id, other_user.id)
    db_session.commit()
    scheduler.drain()
    db_session.refresh(community)
    assert community.member_count == 2


def test_owner_cannot_leave(db_session, public_community, test_user, other_user) -> None:
    with pytest.raises(ValidationError):
        campus.leave_community(db_session, test_user, public_community.id)
    with pytest.raises(NotFoundError):
        campus.leave_community(db_session, other_user, public_community.id)


def test_rsvp_tracks_attendees_and_capacity(
    db_session, scheduler, test_user, other_user, make_user
) -> None:
    event = campus.create_event(
        db_session, test_user, "Hack Night", utcnow() + timedelta(days=1), max_attendees=2
    )
    db_session.commit()

    campus.rsvp_event(db_session, other_user, event.id, "going")
    db_session.commit()
    with pytest.raises(ConflictError):
        campus.rsvp_event(db_session, make_user(), event.id, "going")

    scheduler.drain()
    db_session.refresh(event)
    assert event.attendee_count == 2

    campus.rsvp_event(db_session, other_user, event.id, "maybe")
    db_session.commit()
    scheduler.drain()
    db_session.refresh(event)
    assert event.attendee_count == 1


def test_create_event_validation(db_session, test_user) -> None:
    starts = utcnow() + timedelta(days=1)
    with pytest.raises(ValidationError):
        campus.create_event(db_session, test_user, "  ", starts)
    with pytest.raises(ValidationError):
        campus.create_event(db_session, test_user, "Talk", starts, ends_at=starts)
    with pytest.raises(ValidationError):
        campus.create_event(db_session, test_user, "Talk", starts, max_attendees=0)
    with pytest.raises(ValidationError):
        campus.rsvp_event(db_session, test_user, 1, "perhaps")


def test_job_applications_update_applicant_count(
    db_session, scheduler, test_user, other_user
) -> None:
    job = campus.post_job(db_session, test_user, "Research Assistant", "Physics Lab")
    db_session.commit()

    campus.apply_to_job(db_session, other_user, job.id, "I like lasers")
    db_session.commit()
    scheduler.drain()
    db_session.refresh(job)
    assert job.applicant_count == 1

    with pytest.raises(ConflictError):
        campus.apply_to_job(db_session, other_user, job.id)

    campus.withdraw_application(db_session, other_user, job.id)
    db_session.commit()
    scheduler.drain()
    db_session.refresh(job)
    assert job.applicant_count == 0

    with pytest.raises(NotFoundError):
        campus.withdraw_application(db_session, other_user, job.id)


def test_expired_job_rejects_applications(db_session, test_user, other_user) -> None:
    job = campus.post_job(db_session, test_user, "Tutor", "Library")
    job.expires_at = utcnow() - timedelta(hours=1)
    db_session.commit()

    with pytest.raises(ValidationError):
        campus.apply_to_job(db_session, other_user, job.id)
    with pytest.raises(ValidationError):
        campus.post_job(
            db_session, test_user, "Tutor", "Library", expires_at=utcnow() - timedelta(days=1)
        )
