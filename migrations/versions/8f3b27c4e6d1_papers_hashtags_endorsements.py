"""papers, hashtags and skill endorsements

Revision ID: 8f3b27c4e6d1
Revises: 5c1e0a9d2b41
Create Date: 2026-10-19 15:40:02.771935

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f3b27c4e6d1"
down_revision: Union[str, Sequence[str], None] = "5c1e0a9d2b41"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the paper, hashtag and skill endorsement tables."""
    op.create_table(
        "paper",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uploaded_by", sa.Integer(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("abstract", sa.Text(), nullable=False),
        sa.Column("authors", sa.JSON(), nullable=False),
        sa.Column("doi", sa.String(length=100), nullable=True),
        sa.Column("pdf_url", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("citation_count", sa.Integer(), nullable=False),
        sa.Column("looking_for_collaborators", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_paper_uploaded_by", "paper", ["uploaded_by"])
    op.create_index(
        "ix_paper_looking_for_collaborators", "paper", ["looking_for_collaborators"]
    )

    op.create_table(
        "paper_author",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("paper_id", sa.Integer(), sa.ForeignKey("paper.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("paper_id", "user_id", name="uq_paper_author"),
    )
    op.create_index("ix_paper_author_paper_id", "paper_author", ["paper_id"])
    op.create_index("ix_paper_author_user_id", "paper_author", ["user_id"])

    op.create_table(
        "hashtag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tag", sa.String(length=100), nullable=False),
        sa.Column("post_count", sa.Integer(), nullable=False),
        sa.Column("trending_score", sa.Float(), nullable=False),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_hashtag_tag", "hashtag", ["tag"], unique=True)
    op.create_index("ix_hashtag_last_used_at", "hashtag", ["last_used_at"])

    op.create_table(
        "post_hashtag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("post.id"), nullable=False),
        sa.Column("hashtag_id", sa.Integer(), sa.ForeignKey("hashtag.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "hashtag_id", name="uq_post_hashtag"),
    )
    op.create_index("ix_post_hashtag_post_id", "post_hashtag", ["post_id"])
    op.create_index(
        "ix_post_hashtag_hashtag_created", "post_hashtag", ["hashtag_id", "created_at"]
    )

    op.create_table(
        "skill_endorsement",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("endorser_id", sa.Integer(), sa.ForeignKey("app_user.id"), nullable=False),
        sa.Column("skill_name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "skill_name",
            "endorser_id",
            name="uq_skill_endorsement_user_skill_endorser",
        ),
    )
    op.create_index("ix_skill_endorsement_user_id", "skill_endorsement", ["user_id"])
    op.create_index("ix_skill_endorsement_endorser_id", "skill_endorsement", ["endorser_id"])


def downgrade() -> None:
    """Drop the tables created by this revision."""
    for table in ("skill_endorsement", "post_hashtag", "hashtag", "paper_author", "paper"):
        op.drop_table(table)
