"""Vote ledger: the single write path for votes, counters and karma.

A cast moves the (voter, target) pair through a three-state machine::

    prior      cast  new        row     score delta
    none       +1    upvoted    insert  +1
    none       -1    downvoted  insert  -1
    upvoted    +1    none       delete  -1
    upvoted    -1    downvoted  update  -2
    downvoted  -1    none       delete  +1
    downvoted  +1    upvoted    update  +2

Casting the same value twice therefore toggles the vote off. The vote row
change, the target's counters and the author's karma are committed together
or not at all.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ventboard.core.errors import (
    ConflictError,
    InvalidInputError,
    InvariantViolationError,
    NotFoundError,
    UnauthenticatedError,
)
from ventboard.core.settings import settings
from ventboard.db.ids import check_id
from ventboard.models import Comment, Post, TargetType, User, Vote
from ventboard.services.counters import VoteTarget, apply_counter_delta
from ventboard.services.identity import Registered, VoterIdentity, identity_columns
from ventboard.services.karma import propagate_karma
from ventboard.services.rate_limit import RateAction, RateLimiter

logger = logging.getLogger(__name__)

VOTE_VALUES = (1, -1)


class VoteAction(enum.Enum):
    """What happens to the vote row during a transition."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Transition:
    """One row of the toggle state machine."""

    new_value: int | None
    action: VoteAction
    upvote_delta: int
    downvote_delta: int

    @property
    def score_delta(self) -> int:
        return self.upvote_delta - self.downvote_delta


_TRANSITIONS: dict[tuple[int | None, int], Transition] = {
    (None, 1): Transition(1, VoteAction.INSERT, 1, 0),
    (None, -1): Transition(-1, VoteAction.INSERT, 0, 1),
    (1, 1): Transition(None, VoteAction.DELETE, -1, 0),
    (1, -1): Transition(-1, VoteAction.UPDATE, -1, 1),
    (-1, -1): Transition(None, VoteAction.DELETE, 0, -1),
    (-1, 1): Transition(1, VoteAction.UPDATE, 1, -1),
}


def plan_transition(prior: int | None, value: int) -> Transition:
    """Return the transition for casting ``value`` over the ``prior`` vote."""
    return _TRANSITIONS[(prior, value)]


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a cast: the caller's vote afterwards and the target's counters."""

    target_type: TargetType
    target_id: int
    vote: int | None
    score: int
    upvotes: int
    downvotes: int


def parse_target_type(raw: TargetType | str) -> TargetType:
    """Coerce a wire value into a :class:`TargetType`."""
    try:
        return TargetType(raw)
    except ValueError as err:
        raise InvalidInputError("Target type must be 'post' or 'comment'") from err


def _validate_value(value: object) -> int:
    if isinstance(value, bool) or value not in VOTE_VALUES:
        raise InvalidInputError("Vote value must be 1 or -1")
    return int(value)  # type: ignore[arg-type]


class VoteLedger:
    """Casts votes and reads back a voter's current vote."""

    def __init__(self, db: Session, rate_limiter: RateLimiter | None = None) -> None:
        self.db = db
        self.rate_limiter = rate_limiter or RateLimiter(db)

    def _load_target(
        self,
        target_type: TargetType,
        target_id: int,
        *,
        lock: bool = False,
    ) -> VoteTarget:
        model: type[Post] | type[Comment] = Post if target_type is TargetType.POST else Comment
        stmt = select(model).where(model.id == target_id)
        if lock:
            stmt = stmt.with_for_update()
        target = self.db.scalars(stmt).first()
        if target is None:
            raise NotFoundError(f"{target_type.value.capitalize()} not found")
        return target

    def _find_vote(
        self,
        identity: VoterIdentity,
        target_type: TargetType,
        target_id: int,
        *,
        lock: bool = False,
    ) -> Vote | None:
        stmt = select(Vote).where(
            Vote.target_type == target_type.value,
            Vote.target_id == target_id,
        )
        if isinstance(identity, Registered):
            stmt = stmt.where(Vote.voter_user_id == identity.user_id)
        else:
            stmt = stmt.where(Vote.voter_anonymous_id == identity.anonymous_id)
        if lock:
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).first()

    def _write_vote_row(
        self,
        existing: Vote | None,
        transition: Transition,
        identity: VoterIdentity,
        target_type: TargetType,
        target_id: int,
    ) -> None:
        if transition.action is VoteAction.INSERT:
            voter_user_id, voter_anonymous_id = identity_columns(identity)
            self.db.add(
                Vote(
                    target_type=target_type.value,
                    target_id=target_id,
                    voter_user_id=voter_user_id,
                    voter_anonymous_id=voter_anonymous_id,
                    value=transition.new_value,
                )
            )
        else:
            if existing is None:
                raise InvariantViolationError(
                    f"No vote row to {transition.action.value} for {identity.actor_key} "
                    f"on {target_type.value} {target_id}"
                )
            # Compare-and-set on the prior value: a racing cast that already
            # changed this row leaves nothing to match.
            matches = (Vote.id == existing.id, Vote.value == existing.value)
            if transition.action is VoteAction.UPDATE:
                stmt = update(Vote).where(*matches).values(value=transition.new_value)
            else:
                stmt = delete(Vote).where(*matches)
            result = self.db.execute(stmt.execution_options(synchronize_session=False))
            if result.rowcount != 1:
                logger.warning(
                    "Vote by %s on %s %s changed underneath a cast",
                    identity.actor_key, target_type.value, target_id,
                )
                raise ConflictError("A concurrent vote on this target was recorded, please retry")
            if transition.action is VoteAction.DELETE:
                self.db.expunge(existing)
        # Surface unique-key collisions before touching any counter.
        self.db.flush()

    def cast(
        self,
        identity: VoterIdentity,
        target_type: TargetType | str,
        target_id: int,
        value: int,
    ) -> VoteOutcome:
        """Cast ``value`` on a target and commit the resulting state.

        Args:
            identity: Who is voting.
            target_type: ``post`` or ``comment``.
            target_id: Identifier of the post or comment.
            value: ``1`` for an upvote, ``-1`` for a downvote.

        Returns:
            The voter's vote after the cast and the target's updated counters.

        Raises:
            InvalidInputError: If the value or target type is not accepted.
            UnauthenticatedError: If a registered voter no longer exists.
            NotFoundError: If the target does not exist.
            RateLimitedError: If vote limiting is enabled and exhausted.
            ConflictError: If a concurrent cast by the same voter won the race.
        """
        value = _validate_value(value)
        target_type = parse_target_type(target_type)
        target_id = check_id(target_id, "Target id")
        if isinstance(identity, Registered) and self.db.get(User, identity.user_id) is None:
            raise UnauthenticatedError("Voter account no longer exists")

        try:
            target = self._load_target(target_type, target_id, lock=True)
            if settings.vote_rate_limit_enabled:
                self.rate_limiter.check(identity, RateAction.VOTE)

            existing = self._find_vote(identity, target_type, target_id, lock=True)
            prior = existing.value if existing is not None else None
            transition = plan_transition(prior, value)

            self._write_vote_row(existing, transition, identity, target_type, target_id)
            score = apply_counter_delta(
                self.db,
                target,
                upvotes=transition.upvote_delta,
                downvotes=transition.downvote_delta,
            )
            propagate_karma(self.db, target.author_id, transition.score_delta, target_type)

            if settings.vote_rate_limit_enabled:
                self.rate_limiter.record(identity, RateAction.VOTE)

            outcome = VoteOutcome(
                target_type=target_type,
                target_id=target.id,
                vote=transition.new_value,
                score=score,
                upvotes=target.upvotes,
                downvotes=target.downvotes,
            )
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            logger.warning(
                "Concurrent vote on %s %s by %s", target_type.value, target_id, identity.actor_key
            )
            raise ConflictError("A concurrent vote on this target was recorded, please retry") from err
        except Exception:
            self.db.rollback()
            raise

        logger.debug(
            "Vote %s on %s %s: %s -> %s (score %d)",
            identity.actor_key, target_type.value, target_id, prior, outcome.vote, outcome.score,
        )
        return outcome

    def current_vote(
        self,
        identity: VoterIdentity,
        target_type: TargetType | str,
        target_id: int,
    ) -> int | None:
        """Return the voter's live vote on a target, or ``None``.

        Raises:
            NotFoundError: If the target does not exist.
        """
        target_type = parse_target_type(target_type)
        target_id = check_id(target_id, "Target id")
        self._load_target(target_type, target_id)
        vote = self._find_vote(identity, target_type, target_id)
        return vote.value if vote is not None else None
