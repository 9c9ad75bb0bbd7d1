# src/ventboard/api/v1/endpoints/votes.py
"""Vote-related endpoints for the ventboard API."""

from fastapi import APIRouter, status

from ventboard.models import TargetType
from ventboard.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse

from ..dependencies import IdPath, IdentityDep, VoteLedgerDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse, status_code=status.HTTP_200_OK)
async def cast_vote(
    vote_data: VoteCreate,
    identity: IdentityDep,
    ledger: VoteLedgerDep,
) -> VoteResponse:
    """Cast, switch or withdraw a vote on a post or comment.

    Casting the value the caller already holds withdraws the vote.
    """
    outcome = ledger.cast(identity, vote_data.target_type, vote_data.target_id, vote_data.value)
    return VoteResponse(
        target_type=outcome.target_type.value,
        target_id=outcome.target_id,
        vote=outcome.vote,
        score=outcome.score,
        upvotes=outcome.upvotes,
        downvotes=outcome.downvotes,
    )


@router.get("/{target_type}/{target_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    target_type: TargetType,
    target_id: IdPath,
    identity: IdentityDep,
    ledger: VoteLedgerDep,
) -> MyVoteResponse:
    """Get the caller's current vote on a post or comment."""
    return MyVoteResponse(vote=ledger.current_vote(identity, target_type, target_id))
