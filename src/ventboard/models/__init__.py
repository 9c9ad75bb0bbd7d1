"""SQLAlchemy models for the ventboard application."""

from .category import Category
from .comment import Comment
from .post import Post
from .rate import RateLimitBucket, RateLimitEvent
from .user import User
from .vote import TargetType, Vote

__all__ = [
    "Category",
    "Comment",
    "Post",
    "RateLimitBucket", "RateLimitEvent",
    "User",
    "TargetType", "Vote",
]
