"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class KarmaResponse(BaseModel):
    """Karma of a registered user split by source."""

    user_id: int
    post_karma: int
    comment_karma: int
    total_karma: int


class UserProfileResponse(BaseModel):
    """Public profile of a registered user."""

    id: int
    username: str
    karma: int
    post_count: int
    comment_count: int
    created_at: datetime


class AnonymousIdResponse(BaseModel):
    """Freshly issued anonymous identity."""

    anonymous_id: str = Field(..., description="Send back in the X-Anonymous-Id header")
