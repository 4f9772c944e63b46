"""initial schema

Revision ID: 5c1e0a9d2b41
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0a9d2b41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer(), autoincrement=True, nullable=False)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=True)


def _user_fk(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Integer(), sa.ForeignKey("app_user.id"), nullable=nullable)


def _index(table: str, *columns: str) -> None:
    op.create_index(f"ix_{table}_{'_'.join(columns)}", table, list(columns))


def upgrade() -> None:
    """Create the users, content, engagement and campus tables."""
    op.create_table(
        "app_user",
        _id(),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=True),
        sa.Column("profile_picture", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("university", sa.String(length=200), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("experience_level", sa.String(length=32), nullable=False),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("notification_preferences", sa.JSON(), nullable=False),
        sa.Column("follower_count", sa.Integer(), nullable=False),
        sa.Column("following_count", sa.Integer(), nullable=False),
        sa.Column("reputation", sa.Integer(), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("onboarding_complete", sa.Boolean(), nullable=False),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_app_user_external_id", "app_user", ["external_id"], unique=True)

    op.create_table(
        "community",
        _id(),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        _user_fk("owner_id", nullable=True),
        sa.Column("member_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_table(
        "community_member",
        _id(),
        sa.Column("community_id", sa.Integer(), sa.ForeignKey("community.id"), nullable=False),
        _user_fk("user_id"),
        sa.Column("role", sa.String(length=16), nullable=False),
        _created_at("joined_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("community_id", "user_id", name="uq_community_member"),
    )
    _index("community_member", "community_id")
    _index("community_member", "user_id")

    op.create_table(
        "post",
        _id(),
        _user_fk("author_id"),
        sa.Column("community_id", sa.Integer(), sa.ForeignKey("community.id"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("like_count", sa.Integer(), nullable=False),
        sa.Column("comment_count", sa.Integer(), nullable=False),
        sa.Column("share_count", sa.Integer(), nullable=False),
        sa.Column("reaction_counts", sa.JSON(), nullable=False),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("post", "author_id")
    _index("post", "community_id")

    op.create_table(
        "user_feed",
        _id(),
        _user_fk("user_id"),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id"), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_user_feed_user_post"),
    )
    _index("user_feed", "user_id")
    _index("user_feed", "post_id")

    op.create_table(
        "comment",
        _id(),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id"), nullable=False),
        _user_fk("author_id"),
        sa.Column(
            "parent_comment_id", sa.Integer(), sa.ForeignKey("comment.id"), nullable=True
        ),
        sa.Column("depth", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("reply_count", sa.Integer(), nullable=False),
        sa.Column("reaction_counts", sa.JSON(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("comment", "post_id")
    _index("comment", "author_id")
    _index("comment", "parent_comment_id")

    op.create_table(
        "reaction",
        _id(),
        _user_fk("user_id"),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "target_id", "target_type", name="uq_reaction_user_target"
        ),
    )
    _index("reaction", "user_id")
    op.create_index("ix_reaction_target", "reaction", ["target_type", "target_id"])

    op.create_table(
        "follow",
        _id(),
        _user_fk("follower_id"),
        _user_fk("following_id"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )
    _index("follow", "follower_id")
    _index("follow", "following_id")

    op.create_table(
        "repost",
        _id(),
        _user_fk("user_id"),
        sa.Column("original_post_id", sa.Integer(), sa.ForeignKey("post.id"), nullable=False),
        sa.Column("quote_content", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "original_post_id", name="uq_repost_user_post"),
    )
    _index("repost", "user_id")
    _index("repost", "original_post_id")

    op.create_table(
        "bookmark",
        _id(),
        _user_fk("user_id"),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id"), nullable=False),
        sa.Column("collection_name", sa.String(length=100), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_bookmark_user_post"),
    )
    _index("bookmark", "user_id")
    _index("bookmark", "post_id")

    op.create_table(
        "notification",
        _id(),
        _user_fk("recipient_id"),
        _user_fk("actor_id"),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("reference_id", sa.String(length=64), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("notification", "recipient_id")
    _index("notification", "actor_id")
    op.create_index(
        "ix_notification_recipient_read", "notification", ["recipient_id", "is_read"]
    )

    op.create_table(
        "achievement",
        _id(),
        _user_fk("user_id"),
        sa.Column("badge", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        _created_at("earned_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "badge", name="uq_achievement_user_badge"),
    )
    _index("achievement", "user_id")

    op.create_table(
        "event",
        _id(),
        _user_fk("organizer_id", nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("attendee_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("event", "organizer_id")

    op.create_table(
        "event_rsvp",
        _id(),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("event.id"), nullable=False),
        _user_fk("user_id"),
        sa.Column("status", sa.String(length=16), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_rsvp"),
    )
    _index("event_rsvp", "event_id")
    _index("event_rsvp", "user_id")

    op.create_table(
        "job",
        _id(),
        _user_fk("posted_by", nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("company", sa.String(length=200), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("applicant_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("job", "posted_by")

    op.create_table(
        "job_application",
        _id(),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("job.id"), nullable=False),
        _user_fk("user_id"),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "user_id", name="uq_job_application"),
    )
    _index("job_application", "job_id")
    _index("job_application", "user_id")

    op.create_table(
        "story",
        _id(),
        _user_fk("author_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("story", "author_id")

    op.create_table(
        "story_view",
        _id(),
        sa.Column("story_id", sa.Integer(), sa.ForeignKey("story.id"), nullable=False),
        _user_fk("viewer_id"),
        _created_at("viewed_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("story_id", "viewer_id", name="uq_story_view"),
    )
    _index("story_view", "story_id")
    _index("story_view", "viewer_id")

    op.create_table(
        "poll",
        _id(),
        _user_fk("author_id"),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("total_votes", sa.Integer(), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("poll", "author_id")

    op.create_table(
        "poll_vote",
        _id(),
        sa.Column("poll_id", sa.Integer(), sa.ForeignKey("poll.id"), nullable=False),
        _user_fk("user_id"),
        sa.Column("option_id", sa.String(length=32), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("poll_id", "user_id", name="uq_poll_vote"),
    )
    _index("poll_vote", "poll_id")
    _index("poll_vote", "user_id")

    op.create_table(
        "conversation",
        _id(),
        _user_fk("created_by", nullable=True),
        sa.Column("is_group", sa.Boolean(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "conversation_participant",
        _id(),
        sa.Column(
            "conversation_id", sa.Integer(), sa.ForeignKey("conversation.id"), nullable=False
        ),
        _user_fk("user_id"),
        _created_at("joined_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "conversation_id", "user_id", name="uq_conversation_participant"
        ),
    )
    _index("conversation_participant", "conversation_id")
    _index("conversation_participant", "user_id")


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "conversation_participant",
        "conversation",
        "poll_vote",
        "poll",
        "story_view",
        "story",
        "job_application",
        "job",
        "event_rsvp",
        "event",
        "achievement",
        "notification",
        "bookmark",
        "repost",
        "follow",
        "reaction",
        "comment",
        "user_feed",
        "post",
        "community_member",
        "community",
        "app_user",
    ):
        op.drop_table(table)
