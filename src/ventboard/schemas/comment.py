"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ventboard.db.ids import MAX_DB_ID
from ventboard.services.content import COMMENT_MAX_LENGTH


class CommentCreate(BaseModel):
    """Schema for creating a comment or a reply."""

    post_id: int = Field(..., ge=1, le=MAX_DB_ID, description="Post being commented on")
    content: str = Field(..., max_length=COMMENT_MAX_LENGTH, description="Comment body")
    parent_id: int | None = Field(None, ge=1, le=MAX_DB_ID, description="Comment being replied to")


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    post_id: int
    parent_id: int | None
    content: str
    author_id: int | None
    anonymous_id: str | None
    upvotes: int
    downvotes: int
    score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentThreadResponse(CommentResponse):
    """A top-level comment with its direct replies."""

    replies: list[CommentResponse] = Field(default_factory=list)
