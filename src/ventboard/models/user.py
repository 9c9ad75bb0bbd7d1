"""SQLAlchemy models for registered accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base
from ventboard.db.time import utcnow


class User(Base):
    """Registered account that accrues karma from the content it authors.

    The three karma columns are derived fields. They are written only by the
    karma propagator inside a vote transaction; ``karma`` always equals
    ``post_karma + comment_karma``.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    post_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
