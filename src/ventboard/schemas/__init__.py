"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentThreadResponse
from .feed import FeedPageResponse
from .post import HotScoreRequest, HotScoreResponse, PostCreate, PostResponse
from .user import AnonymousIdResponse, KarmaResponse, UserProfileResponse
from .vote import MyVoteResponse, VoteCreate, VoteResponse

__all__ = [
    "CommentCreate", "CommentResponse", "CommentThreadResponse",
    "FeedPageResponse",
    "HotScoreRequest", "HotScoreResponse", "PostCreate", "PostResponse",
    "AnonymousIdResponse", "KarmaResponse", "UserProfileResponse",
    "MyVoteResponse", "VoteCreate", "VoteResponse",
]
