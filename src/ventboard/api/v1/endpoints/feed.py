# src/ventboard/api/v1/endpoints/feed.py
"""Feed endpoints for listing posts in ranked order."""

from fastapi import APIRouter, Query

from ventboard.schemas.feed import FeedPageResponse
from ventboard.schemas.post import PostResponse
from ventboard.services.feed import FeedOrder, FeedPage

from ..dependencies import FeedServiceDep

router = APIRouter(prefix="/feed", tags=["feed"])

# Bounds are enforced by the feed service so every caller gets the same errors.
LimitQuery = Query(None, description="Page size, 1 to 50")
CursorQuery = Query(None, description="next_cursor of the previous page")


def _to_response(page: FeedPage) -> FeedPageResponse:
    return FeedPageResponse(
        posts=[PostResponse.model_validate(post) for post in page.posts],
        next_cursor=page.next_cursor,
    )


@router.get("/new", response_model=FeedPageResponse)
async def list_new(
    feed: FeedServiceDep,
    limit: int | None = LimitQuery,
    cursor: str | None = CursorQuery,
    category_slug: str | None = Query(None, description="Restrict to one category"),
) -> FeedPageResponse:
    """Return the newest posts first."""
    return _to_response(feed.list_new(limit=limit, cursor=cursor, category_slug=category_slug))


@router.get("/hot", response_model=FeedPageResponse)
async def list_hot(
    feed: FeedServiceDep,
    limit: int | None = LimitQuery,
    cursor: str | None = CursorQuery,
    category_slug: str | None = Query(None, description="Restrict to one category"),
) -> FeedPageResponse:
    """Return trending posts first."""
    return _to_response(feed.list_hot(limit=limit, cursor=cursor, category_slug=category_slug))


@router.get("/category", response_model=FeedPageResponse)
async def list_by_category(
    feed: FeedServiceDep,
    category_slug: str | None = Query(None, description="Category to list"),
    limit: int | None = LimitQuery,
    cursor: str | None = CursorQuery,
    sort: FeedOrder = Query(FeedOrder.NEW, description="new or hot"),
) -> FeedPageResponse:
    """Return one category's posts; the slug is required."""
    return _to_response(
        feed.list_by_category(category_slug, limit=limit, cursor=cursor, order=sort)
    )
