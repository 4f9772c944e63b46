"""Communities, campus events and the jobs board."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from campus_hub.db.time import as_utc, utcnow
from campus_hub.models import (
    Community,
    CommunityMember,
    Event,
    EventRSVP,
    Job,
    JobApplication,
    User,
)
from campus_hub.models.campus import RSVP_STATUSES
from campus_hub.models.community import COMMUNITY_TYPES
from campus_hub.services import counters
from campus_hub.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from campus_hub.services.scheduler import run_after

# Configure logger for this module
logger = logging.getLogger(__name__)

COMMUNITY_NAME_MIN_LENGTH = 3
COMMUNITY_NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
COVER_LETTER_MAX_LENGTH = 3000


# Communities


def create_community(
    db: Session,
    owner: User,
    slug: str,
    name: str,
    description: str = "",
    type: str = "public",
) -> Community:
    """Create a community with the creator as its owning member."""
    name = name.strip()
    if len(name) < COMMUNITY_NAME_MIN_LENGTH:
        raise ValidationError(
            f"Community name must be at least {COMMUNITY_NAME_MIN_LENGTH} characters"
        )
    if len(name) > COMMUNITY_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Community name must be at most {COMMUNITY_NAME_MAX_LENGTH} characters"
        )
    if type not in COMMUNITY_TYPES:
        raise ValidationError(f"Invalid community type: {type}")
    if db.query(Community.id).filter(Community.slug == slug).first() is not None:
        raise ConflictError("Community slug already exists")

    community = Community(
        slug=slug,
        name=name,
        description=description,
        type=type,
        owner_id=owner.id,
        member_count=1,
    )
    db.add(community)
    db.flush()
    db.add(CommunityMember(community_id=community.id, user_id=owner.id, role="owner"))
    db.flush()
    return community


def _membership(db: Session, community_id: int, user_id: int) -> CommunityMember | None:
    return (
        db.query(CommunityMember)
        .filter(CommunityMember.community_id == community_id, CommunityMember.user_id == user_id)
        .first()
    )


def join_community(db: Session, user: User, community_id: int) -> str:
    """Join a public community or request to join a private one.

    Returns ``"joined"`` or ``"pending"``. Pending requests do not count
    towards ``member_count``.
    """
    community = db.get(Community, community_id)
    if community is None:
        raise NotFoundError("Community not found")

    existing = _membership(db, community_id, user.id)
    if existing is not None:
        if existing.role == "pending":
            raise ConflictError("You already have a pending request to join this community")
        raise ConflictError("You are already a member of this community")

    if community.type == "private":
        db.add(CommunityMember(community_id=community_id, user_id=user.id, role="pending"))
        return "pending"

    db.add(CommunityMember(community_id=community_id, user_id=user.id, role="member"))
    run_after(db, 0, counters.update_community_member_count, community_id=community_id, delta=1)
    return "joined"


def approve_join_request(db: Session, approver: User, community_id: int, user_id: int) -> None:
    """Turn a pending request into a membership (owners and admins only)."""
    approver_membership = _membership(db, community_id, approver.id)
    if approver_membership is None or approver_membership.role not in ("owner", "admin"):
        raise AuthorizationError("Only admins and owners can approve join requests")

    pending = _membership(db, community_id, user_id)
    if pending is None or pending.role != "pending":
        raise NotFoundError("No pending request found for this user")

    pending.role = "member"
    run_after(db, 0, counters.update_community_member_count, community_id=community_id, delta=1)


def leave_community(db: Session, user: User, community_id: int) -> None:
    """Leave a community; owners must stay."""
    if db.get(Community, community_id) is None:
        raise NotFoundError("Community not found")
    membership = _membership(db, community_id, user.id)
    if membership is None:
        raise NotFoundError("You are not a member of this community")
    if membership.role == "owner":
        raise ValidationError("Owners cannot leave their community")

    db.delete(membership)
    if membership.role != "pending":
        run_after(
            db, 0, counters.update_community_member_count, community_id=community_id, delta=-1
        )


# Events


def create_event(
    db: Session,
    organizer: User,
    title: str,
    starts_at: datetime,
    ends_at: datetime | None = None,
    description: str = "",
    location: str | None = None,
    max_attendees: int | None = None,
) -> Event:
    """Create an event; the organizer is RSVPed as going."""
    title = title.strip()
    if not title:
        raise ValidationError("Event title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Event title must not exceed {TITLE_MAX_LENGTH} characters")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Event description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
        )
    if ends_at is not None and as_utc(ends_at) <= as_utc(starts_at):
        raise ValidationError("End date must be after start date")
    if max_attendees is not None and max_attendees < 1:
        raise ValidationError("Max attendees must be at least 1")

    event = Event(
        organizer_id=organizer.id,
        title=title,
        description=description,
        location=location,
        starts_at=starts_at,
        ends_at=ends_at,
        max_attendees=max_attendees,
        attendee_count=1,
    )
    db.add(event)
    db.flush()
    db.add(EventRSVP(event_id=event.id, user_id=organizer.id, status="going"))
    db.flush()
    return event


def rsvp_event(db: Session, user: User, event_id: int, status: str) -> EventRSVP:
    """Create or change the user's RSVP and schedule the attendee delta.

    Capacity is checked against live ``going`` RSVPs, not the counter.
    """
    if status not in RSVP_STATUSES:
        raise ValidationError(f"Invalid RSVP status: {status}")
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")

    existing = (
        db.query(EventRSVP)
        .filter(EventRSVP.event_id == event_id, EventRSVP.user_id == user.id)
        .first()
    )
    was_going = existing is not None and existing.status == "going"
    is_going = status == "going"

    if is_going and not was_going and event.max_attendees is not None:
        going = (
            db.query(func.count(EventRSVP.id))
            .filter(EventRSVP.event_id == event_id, EventRSVP.status == "going")
            .scalar()
            or 0
        )
        if going >= event.max_attendees:
            raise ConflictError("Event is at full capacity")

    if existing is not None:
        existing.status = status
        rsvp = existing
    else:
        rsvp = EventRSVP(event_id=event_id, user_id=user.id, status=status)
        db.add(rsvp)
        db.flush()

    delta = int(is_going) - int(was_going)
    if delta:
        run_after(db, 0, counters.update_event_attendee_count, event_id=event_id, delta=delta)
    return rsvp


# Jobs


def post_job(
    db: Session,
    poster: User,
    title: str,
    company: str,
    description: str = "",
    location: str | None = None,
    expires_at: datetime | None = None,
) -> Job:
    """Publish a job listing."""
    if not title.strip():
        raise ValidationError("Job title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")
    if not company.strip():
        raise ValidationError("Company name cannot be empty")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters")
    if expires_at is not None and as_utc(expires_at) <= utcnow():
        raise ValidationError("Expiry date must be in the future")

    job = Job(
        posted_by=poster.id,
        title=title.strip(),
        company=company.strip(),
        description=description,
        location=location,
        expires_at=expires_at,
        applicant_count=0,
    )
    db.add(job)
    db.flush()
    return job


def apply_to_job(
    db: Session, user: User, job_id: int, cover_letter: str | None = None
) -> JobApplication:
    """Apply to an open listing and schedule the applicant increment."""
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if job.expires_at is not None and as_utc(job.expires_at) < utcnow():
        raise ValidationError("This job listing has expired")

    existing = (
        db.query(JobApplication.id)
        .filter(JobApplication.job_id == job_id, JobApplication.user_id == user.id)
        .first()
    )
    if existing is not None:
        raise ConflictError("You have already applied to this job")
    if cover_letter and len(cover_letter) > COVER_LETTER_MAX_LENGTH:
        raise ValidationError(
            f"Cover letter must not exceed {COVER_LETTER_MAX_LENGTH} characters"
        )

    application = JobApplication(
        job_id=job_id,
        user_id=user.id,
        cover_letter=(cover_letter or "").strip() or None,
        status="applied",
    )
    db.add(application)
    db.flush()
    run_after(db, 0, counters.update_job_applicant_count, job_id=job_id, delta=1)
    return application


def withdraw_application(db: Session, user: User, job_id: int) -> None:
    """Withdraw the user's application and schedule the applicant decrement."""
    application = (
        db.query(JobApplication)
        .filter(JobApplication.job_id == job_id, JobApplication.user_id == user.id)
        .first()
    )
    if application is None:
        raise NotFoundError("Application not found")
    db.delete(application)
    run_after(db, 0, counters.update_job_applicant_count, job_id=job_id, delta=-1)
