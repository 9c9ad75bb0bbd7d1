"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from ventboard.db.ids import MAX_DB_ID


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    target_type: Literal["post", "comment"] = Field(..., description="Kind of content voted on")
    target_id: int = Field(..., ge=1, le=MAX_DB_ID, description="Identifier of the post or comment")
    value: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")


class VoteResponse(BaseModel):
    """Outcome of a cast: the caller's vote and the target's counters."""

    target_type: Literal["post", "comment"]
    target_id: int
    vote: Literal[-1, 1] | None = Field(..., description="Caller's vote after the cast; null if removed")
    score: int
    upvotes: int
    downvotes: int


class MyVoteResponse(BaseModel):
    """The caller's current vote on a target."""

    vote: Literal[-1, 1] | None
