"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .campus import CommunityCreate, CommunityResponse, EventResponse, JobResponse, PollResponse
from .engagement import NotificationResponse, ReactionSummary
from .paper import PaperCreate, PaperResponse
from .post import CommentResponse, HashtagResponse, PostCreate, PostResponse
from .user import EndorsementsResponse, UserResponse, UserSummary

__all__ = [
    "CommentResponse",
    "CommunityCreate", "CommunityResponse",
    "EventResponse", "JobResponse", "PollResponse",
    "EndorsementsResponse",
    "HashtagResponse",
    "NotificationResponse", "ReactionSummary",
    "PaperCreate", "PaperResponse",
    "PostCreate", "PostResponse",
    "UserResponse", "UserSummary",
]
