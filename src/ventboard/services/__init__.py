"""Business logic services for the ventboard application."""

from .content import ContentService
from .feed import FeedService
from .rate_limit import RateLimiter
from .votes import VoteLedger

__all__ = [
    "ContentService",
    "FeedService",
    "RateLimiter",
    "VoteLedger",
]
