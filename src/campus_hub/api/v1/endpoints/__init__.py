# src/campus_hub/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .bookmarks import router as bookmarks_router
from .comments import router as comments_router
from .communities import router as communities_router
from .conversations import router as conversations_router
from .endorsements import router as endorsements_router
from .events import router as events_router
from .feed import router as feed_router
from .follows import router as follows_router
from .gamification import router as gamification_router
from .hashtags import router as hashtags_router
from .jobs import router as jobs_router
from .notifications import router as notifications_router
from .papers import router as papers_router
from .polls import router as polls_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .reposts import router as reposts_router
from .stories import router as stories_router
from .users import router as users_router
from .webhooks import router as webhooks_router

__all__ = [
    "bookmarks_router",
    "comments_router",
    "communities_router",
    "conversations_router",
    "endorsements_router",
    "events_router",
    "feed_router",
    "follows_router",
    "gamification_router",
    "hashtags_router",
    "jobs_router",
    "notifications_router",
    "papers_router",
    "polls_router",
    "posts_router",
    "reactions_router",
    "reposts_router",
    "stories_router",
    "users_router",
    "webhooks_router",
]
