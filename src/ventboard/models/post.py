"""SQLAlchemy models for posts ("frustrations")."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base
from ventboard.db.time import utcnow


class Post(Base):
    """Primary content entity: a frustration filed under a category.

    Vote counters and ``hot_score`` are maintained by the vote ledger only;
    ``comment_count`` is maintained by comment creation.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "NOT (author_id IS NOT NULL AND anonymous_id IS NOT NULL)",
            name="ck_post_single_author_identity",
        ),
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_post_counters_non_negative"),
        Index("ix_post_new_order", "created_at", "id"),
        Index("ix_post_hot_order", "hot_score", "created_at", "id"),
        Index("ix_post_category_id", "category_id"),
        Index("ix_post_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    frustration: Mapped[str] = mapped_column(Text, nullable=False)
    # Free-text self description of the poster, not an account reference.
    identity: Mapped[str] = mapped_column(Text, nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("category.id"),
        nullable=False,
    )

    # At most one of these is set; both null only for legacy rows.
    author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )
    anonymous_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hot_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
