# src/campus_hub/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    bookmarks_router,
    comments_router,
    communities_router,
    conversations_router,
    endorsements_router,
    events_router,
    feed_router,
    follows_router,
    gamification_router,
    hashtags_router,
    jobs_router,
    notifications_router,
    papers_router,
    polls_router,
    posts_router,
    reactions_router,
    reposts_router,
    stories_router,
    users_router,
    webhooks_router,
)

# Registration order matters where prefixes overlap (/users/me before /users/{id}).
ROUTERS = (
    webhooks_router,
    users_router,
    follows_router,
    endorsements_router,
    posts_router,
    hashtags_router,
    comments_router,
    reactions_router,
    reposts_router,
    bookmarks_router,
    feed_router,
    notifications_router,
    gamification_router,
    communities_router,
    events_router,
    jobs_router,
    stories_router,
    polls_router,
    conversations_router,
    papers_router,
)

__all__ = ["ROUTERS"]
