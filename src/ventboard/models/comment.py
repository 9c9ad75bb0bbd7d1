"""SQLAlchemy models for comments and reply threads."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base
from ventboard.db.time import utcnow


class Comment(Base):
    """Comment on a post, optionally replying to another comment on it."""

    __tablename__ = "comment"
    __table_args__ = (
        CheckConstraint(
            "NOT (author_id IS NOT NULL AND anonymous_id IS NOT NULL)",
            name="ck_comment_single_author_identity",
        ),
        CheckConstraint(
            "upvotes >= 0 AND downvotes >= 0",
            name="ck_comment_counters_non_negative",
        ),
        Index("ix_comment_post_id", "post_id"),
        Index("ix_comment_parent_id", "parent_id"),
        Index("ix_comment_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=True,
    )

    author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )
    anonymous_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
