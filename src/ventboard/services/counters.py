"""Aggregate counter maintenance for voted-on posts and comments.

Only the vote ledger calls into this module, inside its own transaction.
Increments are expressed in SQL so concurrent voters on the same target
never lose each other's updates.
"""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from ventboard.core.errors import InvariantViolationError
from ventboard.models import Comment, Post
from ventboard.services.ranking import hot_score

logger = logging.getLogger(__name__)

VoteTarget = Post | Comment


def apply_counter_delta(
    db: Session,
    target: VoteTarget,
    *,
    upvotes: int,
    downvotes: int,
) -> int:
    """Shift a target's counters and return the resulting score.

    ``score`` moves by ``upvotes - downvotes``. Posts also get their stored
    hot score recomputed from the new score.

    Raises:
        InvariantViolationError: If the stored counters no longer satisfy
            ``score == upvotes - downvotes`` with both counts non-negative.
    """
    model = type(target)
    db.execute(
        update(model)
        .where(model.id == target.id)
        .values(
            upvotes=model.upvotes + upvotes,
            downvotes=model.downvotes + downvotes,
            score=model.score + (upvotes - downvotes),
        )
        .execution_options(synchronize_session=False)
    )
    db.refresh(target)

    if (
        target.upvotes < 0
        or target.downvotes < 0
        or target.score != target.upvotes - target.downvotes
    ):
        logger.error(
            "Counter invariant violated on %s %s: upvotes=%d downvotes=%d score=%d",
            model.__tablename__, target.id, target.upvotes, target.downvotes, target.score,
        )
        raise InvariantViolationError(
            f"Vote counters of {model.__tablename__} {target.id} are inconsistent"
        )

    if isinstance(target, Post):
        target.hot_score = hot_score(target.score, target.created_at)
    return target.score
