"""Karma propagation and lookup for registered authors."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ventboard.core.errors import InvariantViolationError, NotFoundError
from ventboard.db.ids import check_id
from ventboard.models import TargetType, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KarmaBreakdown:
    """Karma of one user split by the kind of content that earned it."""

    user_id: int
    post_karma: int
    comment_karma: int

    @property
    def total_karma(self) -> int:
        return self.post_karma + self.comment_karma


def propagate_karma(
    db: Session,
    author_id: int | None,
    delta: int,
    source: TargetType,
) -> None:
    """Apply a score delta of authored content to its author's karma.

    Anonymous content (``author_id is None``) and zero deltas are no-ops.
    Must run in the same transaction as the score change it mirrors.
    """
    if author_id is None or delta == 0:
        return

    values: dict[str, object] = {"karma": User.karma + delta}
    if source is TargetType.POST:
        values["post_karma"] = User.post_karma + delta
    else:
        values["comment_karma"] = User.comment_karma + delta

    result = db.execute(
        update(User)
        .where(User.id == author_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.error("Karma target user %s missing while applying delta %d", author_id, delta)
        raise InvariantViolationError(f"Author {author_id} of voted content does not exist")


def get_karma(db: Session, user_id: int) -> KarmaBreakdown:
    """Return the maintained karma counters of a user.

    Raises:
        NotFoundError: If the user does not exist.
    """
    user_id = check_id(user_id, "User id")
    row = db.execute(
        select(User.id, User.post_karma, User.comment_karma, User.karma).where(User.id == user_id)
    ).first()
    if row is None:
        raise NotFoundError("User not found")

    breakdown = KarmaBreakdown(user_id=row.id, post_karma=row.post_karma, comment_karma=row.comment_karma)
    if breakdown.total_karma != row.karma:
        logger.error(
            "Karma components of user %s diverged: post=%d comment=%d total=%d",
            user_id, row.post_karma, row.comment_karma, row.karma,
        )
        raise InvariantViolationError(f"Karma of user {user_id} is inconsistent")
    return breakdown
