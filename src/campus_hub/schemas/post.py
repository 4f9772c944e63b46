# src/campus_hub/schemas/post.py
"""Post, comment and feed Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    content: str = Field(..., min_length=1, max_length=5000, description="Post text")
    community_id: int | None = Field(None, description="Community the post belongs to")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    community_id: int | None
    content: str
    like_count: int
    comment_count: int
    share_count: int
    reaction_counts: dict[str, int]
    created_at: datetime


class PostWithAuthor(BaseModel):
    post: PostResponse
    author: UserSummary


class PostPage(BaseModel):
    """One page of posts, newest first."""

    items: list[PostWithAuthor]
    has_more: bool
    next_cursor: int | None = None


class PostDeleted(BaseModel):
    """Rows removed alongside a deleted post."""

    comment_reactions: int
    comments: int
    reactions: int
    reposts: int
    bookmarks: int
    feed_rows: int
    hashtags: int = 0


class CommentCreate(BaseModel):
    """Schema for a comment or a reply to another comment."""

    content: str = Field(..., min_length=1, max_length=2000)
    parent_comment_id: int | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    author_id: int
    parent_comment_id: int | None
    depth: int
    content: str
    reply_count: int
    reaction_counts: dict[str, int]
    created_at: datetime


class CommentWithAuthor(BaseModel):
    comment: CommentResponse
    author: UserSummary


class HashtagResponse(BaseModel):
    """Usage statistics for one hashtag."""

    id: int
    tag: str
    post_count: int
    trending_score: float = 0.0
    last_used_at: datetime | None = None


class HashtagPostPage(PostPage):
    """Posts carrying a hashtag; ``hashtag`` is null for an unknown tag."""

    hashtag: HashtagResponse | None = None
