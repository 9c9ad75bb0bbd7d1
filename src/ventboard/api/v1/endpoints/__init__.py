"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .feed import router as feed_router
from .identity import router as identity_router
from .posts import router as posts_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "comments_router",
    "feed_router",
    "identity_router",
    "posts_router",
    "users_router",
    "votes_router",
]
