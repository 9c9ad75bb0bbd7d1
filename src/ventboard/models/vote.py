"""Models capturing voting interactions on posts and comments."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base
from ventboard.db.time import utcnow


class TargetType(str, enum.Enum):
    """Kinds of content that can receive votes."""

    POST = "post"
    COMMENT = "comment"


class Vote(Base):
    """The single live vote of one voter on one target.

    A row exists only while the voter is up- or downvoting; toggling the same
    direction again deletes it, so ``value`` is never 0.
    """

    __tablename__ = "vote"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_vote_value"),
        CheckConstraint("target_type IN ('post', 'comment')", name="ck_vote_target_type"),
        CheckConstraint(
            "(voter_user_id IS NULL) <> (voter_anonymous_id IS NULL)",
            name="ck_vote_single_voter_identity",
        ),
        # NULLs are distinct, so each constraint only binds its own identity kind.
        UniqueConstraint(
            "target_type", "target_id", "voter_user_id",
            name="uq_vote_target_user",
        ),
        UniqueConstraint(
            "target_type", "target_id", "voter_anonymous_id",
            name="uq_vote_target_anonymous",
        ),
        Index("ix_vote_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)

    voter_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=True,
    )
    voter_anonymous_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
