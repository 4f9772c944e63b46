# src/campus_hub/api/v1/endpoints/events.py
"""Campus event endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Event, EventRSVP
from campus_hub.schemas.campus import EventCreate, EventResponse, RSVPRequest, RSVPResponse
from campus_hub.services import campus

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/", response_model=list[EventResponse])
async def list_events(db: SessionDep) -> list[Event]:
    return db.query(Event).order_by(Event.starts_at).all()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: SessionDep) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(body: EventCreate, current_user: CurrentUserDep, db: SessionDep) -> Event:
    """Create an event; the organizer is counted as the first attendee."""
    event = run_write(
        db,
        lambda: campus.create_event(
            db,
            current_user,
            body.title,
            body.starts_at,
            body.ends_at,
            body.description,
            body.location,
            body.max_attendees,
        ),
    )
    db.refresh(event)
    return event


@router.put("/{event_id}/rsvp", response_model=RSVPResponse)
async def rsvp(
    event_id: int,
    body: RSVPRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EventRSVP:
    """Set your RSVP status for an event."""
    result = run_write(db, lambda: campus.rsvp_event(db, current_user, event_id, body.status))
    db.refresh(result)
    return result
