# src/ventboard/api/v1/endpoints/users.py
"""User profile and karma endpoints."""

from fastapi import APIRouter, Query

from ventboard.schemas.feed import FeedPageResponse
from ventboard.schemas.post import PostResponse
from ventboard.schemas.user import KarmaResponse, UserProfileResponse
from ventboard.services.karma import get_karma

from ..dependencies import ContentServiceDep, FeedServiceDep, IdPath, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user_profile(user_id: IdPath, content: ContentServiceDep) -> UserProfileResponse:
    """Return a user's public profile."""
    profile = content.get_profile(user_id)
    return UserProfileResponse(
        id=profile.user.id,
        username=profile.user.username,
        karma=profile.user.karma,
        post_count=profile.post_count,
        comment_count=profile.comment_count,
        created_at=profile.user.created_at,
    )


@router.get("/{user_id}/karma", response_model=KarmaResponse)
async def get_user_karma(user_id: IdPath, db: SessionDep) -> KarmaResponse:
    """Return a user's karma split into post and comment karma."""
    breakdown = get_karma(db, user_id)
    return KarmaResponse(
        user_id=breakdown.user_id,
        post_karma=breakdown.post_karma,
        comment_karma=breakdown.comment_karma,
        total_karma=breakdown.total_karma,
    )


@router.get("/{user_id}/posts", response_model=FeedPageResponse)
async def list_user_posts(
    user_id: IdPath,
    feed: FeedServiceDep,
    limit: int | None = Query(None, description="Page size, 1 to 50"),
    cursor: str | None = Query(None, description="next_cursor of the previous page"),
) -> FeedPageResponse:
    """Return a user's posts, newest first."""
    page = feed.list_by_user(user_id, limit=limit, cursor=cursor)
    return FeedPageResponse(
        posts=[PostResponse.model_validate(post) for post in page.posts],
        next_cursor=page.next_cursor,
    )
