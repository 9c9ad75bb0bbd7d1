# models/rate.py
"""Timestamped actions consumed by the sliding-window rate limiter."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ventboard.db.session import Base
from ventboard.db.time import utcnow


class RateLimitEvent(Base):
    """One successful rate-limited action by an actor.

    ``actor_key`` is ``user:<id>`` or ``anon:<anonymous id>``. Rows older than
    the configured window carry no meaning and may be pruned at any time.
    """

    __tablename__ = "rate_limit_event"
    __table_args__ = (
        Index("ix_rate_limit_event_lookup", "actor_key", "action", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_key: Mapped[str] = mapped_column(Text, nullable=False)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class RateLimitBucket(Base):
    """Lock row for one actor and action.

    Every rate-limited write upserts its bucket before counting events, so
    concurrent requests by the same actor take their turn on this row until
    the surrounding transaction ends.
    """

    __tablename__ = "rate_limit_bucket"

    actor_key: Mapped[str] = mapped_column(Text, primary_key=True)
    action: Mapped[str] = mapped_column(String(16), primary_key=True)
    touched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
