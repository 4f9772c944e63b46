# src/campus_hub/schemas/campus.py
"""Schemas for communities, events, jobs, stories, polls and conversations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    slug: str = Field(..., min_length=1, max_length=100)
    name: str
    description: str = ""
    type: str = "public"


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: str
    type: str
    owner_id: int | None
    member_count: int


class MembershipStatus(BaseModel):
    status: str


class EventCreate(BaseModel):
    title: str
    starts_at: datetime
    ends_at: datetime | None = None
    description: str = ""
    location: str | None = None
    max_attendees: int | None = None


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    organizer_id: int | None
    title: str
    description: str
    location: str | None
    starts_at: datetime
    ends_at: datetime | None
    max_attendees: int | None
    attendee_count: int


class RSVPRequest(BaseModel):
    status: str = Field(..., description="going, maybe or not_going")


class RSVPResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: int
    user_id: int
    status: str


class JobCreate(BaseModel):
    title: str
    company: str
    description: str = ""
    location: str | None = None
    expires_at: datetime | None = None


class JobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    posted_by: int | None
    title: str
    company: str
    location: str | None
    description: str
    expires_at: datetime | None
    applicant_count: int


class JobApplicationCreate(BaseModel):
    cover_letter: str | None = None


class JobApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    user_id: int
    status: str
    created_at: datetime


class StoryCreate(BaseModel):
    content: str


class StoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    content: str
    view_count: int
    expires_at: datetime


class PollCreate(BaseModel):
    question: str
    options: list[str]
    ends_at: datetime | None = None


class PollOption(BaseModel):
    id: str
    text: str
    vote_count: int


class PollResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    question: str
    options: list[PollOption]
    total_votes: int
    ends_at: datetime | None


class PollVoteRequest(BaseModel):
    option_id: str


class ConversationCreate(BaseModel):
    user_id: int


class ConversationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_by: int | None
    is_group: bool
    name: str | None
    created_at: datetime
