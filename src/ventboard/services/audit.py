"""Integrity checks for the derived vote and karma counters.

The checks recompute aggregates from the rows that justify them and compare
them with the stored values. A mismatch is reported, never repaired: the
counters have a single write path (the vote ledger) and drift means a bug.
"""

from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from ventboard.core.errors import InvariantViolationError, NotFoundError
from ventboard.models import Comment, Post, TargetType, User, Vote
from ventboard.services.counters import VoteTarget
from ventboard.services.karma import get_karma

logger = logging.getLogger(__name__)


def _target_type_of(target: VoteTarget) -> TargetType:
    return TargetType.POST if isinstance(target, Post) else TargetType.COMMENT


def count_live_votes(db: Session, target_type: TargetType, target_id: int) -> tuple[int, int]:
    """Return ``(upvotes, downvotes)`` counted from live vote rows."""
    ups, downs = db.execute(
        select(
            func.coalesce(func.sum(case((Vote.value == 1, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Vote.value == -1, 1), else_=0)), 0),
        ).where(Vote.target_type == target_type.value, Vote.target_id == target_id)
    ).one()
    return int(ups), int(downs)


def check_target_counters(db: Session, target: VoteTarget) -> None:
    """Verify a post's or comment's counters against its live votes.

    Raises:
        InvariantViolationError: On any mismatch.
    """
    target_type = _target_type_of(target)
    ups, downs = count_live_votes(db, target_type, target.id)
    if (target.upvotes, target.downvotes, target.score) != (ups, downs, ups - downs):
        logger.error(
            "%s %s stores %d/%d/%d but live votes give %d/%d",
            target_type.value, target.id, target.upvotes, target.downvotes, target.score, ups, downs,
        )
        raise InvariantViolationError(
            f"Counters of {target_type.value} {target.id} disagree with its votes"
        )


def check_user_karma(db: Session, user_id: int) -> None:
    """Verify a user's karma against the scores of the content they authored.

    Raises:
        NotFoundError: If the user does not exist.
        InvariantViolationError: On any mismatch.
    """
    breakdown = get_karma(db, user_id)
    post_sum = db.scalar(
        select(func.coalesce(func.sum(Post.score), 0)).where(Post.author_id == user_id)
    )
    comment_sum = db.scalar(
        select(func.coalesce(func.sum(Comment.score), 0)).where(Comment.author_id == user_id)
    )
    if (breakdown.post_karma, breakdown.comment_karma) != (post_sum, comment_sum):
        logger.error(
            "User %s karma is %d/%d but authored content sums to %d/%d",
            user_id, breakdown.post_karma, breakdown.comment_karma, post_sum, comment_sum,
        )
        raise InvariantViolationError(f"Karma of user {user_id} disagrees with authored scores")


def audit_all(db: Session) -> list[str]:
    """Run every check and return a description of each failure found."""
    failures: list[str] = []
    for model in (Post, Comment):
        for target in db.scalars(select(model).order_by(model.id)).all():
            try:
                check_target_counters(db, target)
            except InvariantViolationError as exc:
                failures.append(exc.detail)
    for user_id in db.scalars(select(User.id).order_by(User.id)).all():
        try:
            check_user_karma(db, user_id)
        except (InvariantViolationError, NotFoundError) as exc:
            failures.append(exc.detail)
    return failures
