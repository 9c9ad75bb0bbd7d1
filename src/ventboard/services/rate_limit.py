"""Sliding-window rate limiting for content creation and voting.

Each successful action is stored as a timestamped :class:`RateLimitEvent`
row inside the same transaction as the action itself. A check counts the
actor's events in the trailing window, so allowance comes back one event at
a time as old events age out.

Before counting, a check upserts the actor's :class:`RateLimitBucket` row.
That write holds a row lock on PostgreSQL and the database write lock on
SQLite until the transaction ends, so two requests by one actor can never
both pass the count before either records its event.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from ventboard.core.errors import RateLimitedError
from ventboard.core.settings import settings
from ventboard.db.time import as_utc, utcnow
from ventboard.models import RateLimitBucket, RateLimitEvent
from ventboard.services.identity import Registered, VoterIdentity

logger = logging.getLogger(__name__)

_UPSERT_BY_DIALECT = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class RateAction(str, enum.Enum):
    """Actions subject to per-actor ceilings."""

    POST = "post"
    COMMENT = "comment"
    VOTE = "vote"


@dataclass(frozen=True)
class RateLimitRule:
    """Ceiling of ``limit`` actions per ``window_seconds``."""

    limit: int
    window_seconds: int


def rule_for(identity: VoterIdentity, action: RateAction) -> RateLimitRule:
    """Return the configured ceiling for an identity kind and action."""
    registered = isinstance(identity, Registered)
    limits = {
        RateAction.POST: (settings.registered_post_limit, settings.anonymous_post_limit),
        RateAction.COMMENT: (settings.registered_comment_limit, settings.anonymous_comment_limit),
        RateAction.VOTE: (settings.registered_vote_limit, settings.anonymous_vote_limit),
    }
    registered_limit, anonymous_limit = limits[action]
    return RateLimitRule(
        limit=registered_limit if registered else anonymous_limit,
        window_seconds=settings.rate_limit_window_seconds,
    )


class RateLimiter:
    """Per-actor sliding-window counter backed by the database."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _lock_bucket(self, identity: VoterIdentity, action: RateAction, now: datetime) -> None:
        key = {"actor_key": identity.actor_key, "action": action.value}
        upsert = _UPSERT_BY_DIALECT.get(self.db.get_bind().dialect.name)
        if upsert is not None:
            stmt = upsert(RateLimitBucket).values(**key, touched_at=now)
            self.db.execute(
                stmt.on_conflict_do_update(
                    index_elements=["actor_key", "action"],
                    set_={"touched_at": stmt.excluded.touched_at},
                )
            )
            return

        bucket = self.db.scalars(
            select(RateLimitBucket).filter_by(**key).with_for_update()
        ).first()
        if bucket is None:
            self.db.add(RateLimitBucket(**key, touched_at=now))
        else:
            bucket.touched_at = now
        self.db.flush()

    def check(
        self,
        identity: VoterIdentity,
        action: RateAction,
        *,
        now: datetime | None = None,
    ) -> int:
        """Ensure the actor may perform ``action`` now.

        Returns:
            How many more actions are allowed in the current window, this one included.

        Raises:
            RateLimitedError: If the ceiling has been reached.
        """
        now = as_utc(now or utcnow())
        rule = rule_for(identity, action)
        window_start = now - timedelta(seconds=rule.window_seconds)
        self._lock_bucket(identity, action, now)

        count, oldest = self.db.execute(
            select(func.count(RateLimitEvent.id), func.min(RateLimitEvent.created_at)).where(
                RateLimitEvent.actor_key == identity.actor_key,
                RateLimitEvent.action == action.value,
                RateLimitEvent.created_at > window_start,
            )
        ).one()

        if count >= rule.limit:
            retry_after = rule.window_seconds
            if oldest is not None:
                retry_after = int((as_utc(oldest) - window_start).total_seconds()) + 1
            logger.info(
                "Rate limit hit for %s on %s (%d/%d)",
                identity.actor_key, action.value, count, rule.limit,
            )
            raise RateLimitedError(
                f"Too many {action.value}s, please try again later",
                retry_after=retry_after,
            )
        return rule.limit - count

    def record(
        self,
        identity: VoterIdentity,
        action: RateAction,
        *,
        now: datetime | None = None,
    ) -> None:
        """Add an event for a successful action to the current transaction.

        The actor's own expired events for this action are pruned as well.
        """
        now = as_utc(now or utcnow())
        rule = rule_for(identity, action)
        self.db.execute(
            delete(RateLimitEvent).where(
                RateLimitEvent.actor_key == identity.actor_key,
                RateLimitEvent.action == action.value,
                RateLimitEvent.created_at <= now - timedelta(seconds=rule.window_seconds),
            )
            .execution_options(synchronize_session=False)
        )
        self.db.add(
            RateLimitEvent(actor_key=identity.actor_key, action=action.value, created_at=now)
        )

    def prune_expired(self, *, now: datetime | None = None) -> int:
        """Delete every event older than the window and return how many were removed.

        Buckets untouched for a whole window are dropped as well.
        """
        now = as_utc(now or utcnow())
        cutoff = now - timedelta(seconds=settings.rate_limit_window_seconds)
        self.db.execute(
            delete(RateLimitBucket)
            .where(RateLimitBucket.touched_at <= cutoff)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(RateLimitEvent)
            .where(RateLimitEvent.created_at <= cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
