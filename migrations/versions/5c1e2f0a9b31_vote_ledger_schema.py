"""vote ledger schema

Revision ID: 5c1e2f0a9b31
Revises:
Create Date: 2026-10-16 09:12:40.512204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2f0a9b31"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create categories, accounts, content, votes and rate-limit events."""
    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("karma", sa.Integer(), nullable=False),
        sa.Column("post_karma", sa.Integer(), nullable=False),
        sa.Column("comment_karma", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("frustration", sa.Text(), nullable=False),
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("anonymous_id", sa.Text(), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("hot_score", sa.Float(), nullable=False),
        sa.Column("comment_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "NOT (author_id IS NOT NULL AND anonymous_id IS NOT NULL)",
            name="ck_post_single_author_identity",
        ),
        sa.CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_post_counters_non_negative"),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_new_order", "post", ["created_at", "id"])
    op.create_index("ix_post_hot_order", "post", ["hot_score", "created_at", "id"])
    op.create_index("ix_post_category_id", "post", ["category_id"])
    op.create_index("ix_post_author_id", "post", ["author_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("anonymous_id", sa.Text(), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "NOT (author_id IS NOT NULL AND anonymous_id IS NOT NULL)",
            name="ck_comment_single_author_identity",
        ),
        sa.CheckConstraint(
            "upvotes >= 0 AND downvotes >= 0",
            name="ck_comment_counters_non_negative",
        ),
        sa.ForeignKeyConstraint(["author_id"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["comment.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_index("ix_comment_parent_id", "comment", ["parent_id"])
    op.create_index("ix_comment_author_id", "comment", ["author_id"])

    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("target_type", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("voter_user_id", sa.Integer(), nullable=True),
        sa.Column("voter_anonymous_id", sa.Text(), nullable=True),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("value IN (1, -1)", name="ck_vote_value"),
        sa.CheckConstraint("target_type IN ('post', 'comment')", name="ck_vote_target_type"),
        sa.CheckConstraint(
            "(voter_user_id IS NULL) <> (voter_anonymous_id IS NULL)",
            name="ck_vote_single_voter_identity",
        ),
        sa.ForeignKeyConstraint(["voter_user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("target_type", "target_id", "voter_user_id", name="uq_vote_target_user"),
        sa.UniqueConstraint(
            "target_type", "target_id", "voter_anonymous_id", name="uq_vote_target_anonymous"
        ),
    )
    op.create_index("ix_vote_target", "vote", ["target_type", "target_id"])

    op.create_table(
        "rate_limit_event",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("actor_key", sa.Text(), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_rate_limit_event_lookup",
        "rate_limit_event",
        ["actor_key", "action", "created_at"],
    )

    op.create_table(
        "rate_limit_bucket",
        sa.Column("actor_key", sa.Text(), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("touched_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("actor_key", "action"),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("rate_limit_bucket")
    op.drop_index("ix_rate_limit_event_lookup", table_name="rate_limit_event")
    op.drop_table("rate_limit_event")
    op.drop_index("ix_vote_target", table_name="vote")
    op.drop_table("vote")
    op.drop_index("ix_comment_author_id", table_name="comment")
    op.drop_index("ix_comment_parent_id", table_name="comment")
    op.drop_index("ix_comment_post_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("ix_post_author_id", table_name="post")
    op.drop_index("ix_post_category_id", table_name="post")
    op.drop_index("ix_post_hot_order", table_name="post")
    op.drop_index("ix_post_new_order", table_name="post")
    op.drop_table("post")
    op.drop_table("user_account")
    op.drop_table("category")
