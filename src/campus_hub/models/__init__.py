# src/campus_hub/models/__init__.py
"""SQLAlchemy models for the Campus Hub application."""

from .campus import Event, EventRSVP, Job, JobApplication
from .comment import Comment
from .community import Community, CommunityMember
from .endorsement import SkillEndorsement
from .follow import Follow
from .hashtag import Hashtag, PostHashtag
from .notification import Achievement, Notification
from .paper import Paper, PaperAuthor
from .post import Post, UserFeed
from .reaction import Reaction
from .repost import Bookmark, Repost
from .social import Conversation, ConversationParticipant, Poll, PollVote, Story, StoryView
from .user import User

__all__ = [
    "Achievement",
    "Bookmark",
    "Comment",
    "Community", "CommunityMember",
    "Conversation", "ConversationParticipant",
    "Event", "EventRSVP",
    "Follow",
    "Hashtag", "PostHashtag",
    "Job", "JobApplication",
    "Notification",
    "Paper", "PaperAuthor",
    "Poll", "PollVote",
    "Post", "UserFeed",
    "Reaction",
    "Repost",
    "SkillEndorsement",
    "Story", "StoryView",
    "User",
]
