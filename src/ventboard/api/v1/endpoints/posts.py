# src/ventboard/api/v1/endpoints/posts.py
"""Post-related endpoints for the ventboard API."""

from fastapi import APIRouter, status

from ventboard.models import Post
from ventboard.schemas.comment import CommentResponse, CommentThreadResponse
from ventboard.schemas.post import HotScoreRequest, HotScoreResponse, PostCreate, PostResponse
from ventboard.services.ranking import hot_score

from ..dependencies import ContentServiceDep, IdPath, IdentityDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    author: IdentityDep,
    content: ContentServiceDep,
) -> Post:
    """Create a new post.

    Args:
        post_data: Frustration text, identity text and category
        author: Registered or anonymous author
        content: Content service

    Returns:
        Created Post object

    Raises:
        InvalidInputError: If a text field is out of bounds
        NotFoundError: If the category does not exist
        RateLimitedError: If the author posted too often in the last hour
    """
    return content.create_post(
        author,
        frustration=post_data.frustration,
        identity_text=post_data.identity,
        category_id=post_data.category_id,
    )


@router.post("/hot-score", response_model=HotScoreResponse)
async def calculate_hot_score(payload: HotScoreRequest) -> HotScoreResponse:
    """Compute the hot ranking value for a vote tally and creation time."""
    return HotScoreResponse(
        hot_score=hot_score(payload.upvotes - payload.downvotes, payload.created_at)
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: IdPath, content: ContentServiceDep) -> Post:
    """Get a specific post by ID."""
    return content.get_post(post_id)


@router.get("/{post_id}/comments", response_model=list[CommentThreadResponse])
async def list_post_comments(
    post_id: IdPath,
    content: ContentServiceDep,
) -> list[CommentThreadResponse]:
    """List a post's top-level comments by score with their direct replies."""
    threads = content.list_comments(post_id)
    return [
        CommentThreadResponse(
            **CommentResponse.model_validate(thread.comment).model_dump(),
            replies=[CommentResponse.model_validate(reply) for reply in thread.replies],
        )
        for thread in threads
    ]
