# src/ventboard/api/v1/endpoints/identity.py
"""Anonymous identity issuance."""

from fastapi import APIRouter

from ventboard.schemas.user import AnonymousIdResponse
from ventboard.services.identity import new_anonymous_id

router = APIRouter(tags=["identity"])


@router.get("/anonymous-id", response_model=AnonymousIdResponse)
async def issue_anonymous_id() -> AnonymousIdResponse:
    """Issue a fresh anonymous id for clients without an account."""
    return AnonymousIdResponse(anonymous_id=new_anonymous_id())
