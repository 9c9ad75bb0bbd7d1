# src/ventboard/api/v1/endpoints/comments.py
"""Comment-related endpoints for the ventboard API."""

from fastapi import APIRouter, status

from ventboard.models import Comment
from ventboard.schemas.comment import CommentCreate, CommentResponse

from ..dependencies import ContentServiceDep, IdentityDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    author: IdentityDep,
    content: ContentServiceDep,
) -> Comment:
    """Comment on a post or reply to another comment on it."""
    return content.create_comment(
        author,
        post_id=comment_data.post_id,
        content=comment_data.content,
        parent_id=comment_data.parent_id,
    )
