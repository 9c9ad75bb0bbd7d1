"""Shared Pydantic schemas for paginated feeds."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .post import PostResponse


class FeedPageResponse(BaseModel):
    """One page of a feed."""

    posts: list[PostResponse]
    next_cursor: str | None = Field(
        ...,
        description="Opaque token for the next page, or null when the feed is exhausted.",
    )
