"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ventboard.db.ids import MAX_DB_ID
from ventboard.services.content import (
    FRUSTRATION_MAX_LENGTH,
    IDENTITY_MAX_LENGTH,
)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    frustration: str = Field(..., max_length=FRUSTRATION_MAX_LENGTH, description="What frustrates you")
    identity: str = Field(..., max_length=IDENTITY_MAX_LENGTH, description="Who you are, in free text")
    category_id: int = Field(..., ge=1, le=MAX_DB_ID, description="Category the post is filed under")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    frustration: str
    identity: str
    category_id: int
    author_id: int | None
    anonymous_id: str | None
    upvotes: int
    downvotes: int
    score: int
    hot_score: float
    comment_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HotScoreRequest(BaseModel):
    """Inputs of the hot ranking calculator."""

    upvotes: int = Field(..., ge=0)
    downvotes: int = Field(..., ge=0)
    created_at: datetime


class HotScoreResponse(BaseModel):
    """Hot ranking value for the supplied inputs."""

    hot_score: float
