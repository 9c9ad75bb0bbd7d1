"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    feed_router,
    identity_router,
    posts_router,
    users_router,
    votes_router,
)

__all__ = [
    "comments_router",
    "feed_router",
    "identity_router",
    "posts_router",
    "users_router",
    "votes_router",
]
