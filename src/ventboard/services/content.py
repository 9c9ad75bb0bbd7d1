"""Creation and retrieval of posts and comments.

Creation is gated by the rate limiter and establishes the zero-vote starting
state that the vote ledger builds on: counters at zero, hence a zero karma
contribution for the author.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ventboard.core.errors import InvalidInputError, NotFoundError
from ventboard.core.settings import settings
from ventboard.db.ids import check_id
from ventboard.db.time import as_utc, utcnow
from ventboard.models import Category, Comment, Post, User
from ventboard.services.identity import VoterIdentity, identity_columns
from ventboard.services.ranking import hot_score
from ventboard.services.rate_limit import RateAction, RateLimiter

logger = logging.getLogger(__name__)

FRUSTRATION_MIN_LENGTH = 3
FRUSTRATION_MAX_LENGTH = 500
IDENTITY_MIN_LENGTH = 1
IDENTITY_MAX_LENGTH = 100
COMMENT_MIN_LENGTH = 3
COMMENT_MAX_LENGTH = 2000


def _clean_text(value: str, label: str, min_length: int, max_length: int) -> str:
    text = (value or "").strip()
    if not min_length <= len(text) <= max_length:
        raise InvalidInputError(f"{label} must be between {min_length} and {max_length} characters")
    return text


@dataclass
class CommentThread:
    """A top-level comment with its direct replies."""

    comment: Comment
    replies: list[Comment] = field(default_factory=list)


@dataclass(frozen=True)
class UserProfile:
    """Public view of a registered user."""

    user: User
    post_count: int
    comment_count: int


class ContentService:
    """Creates and reads posts and comments."""

    def __init__(self, db: Session, rate_limiter: RateLimiter | None = None) -> None:
        self.db = db
        self.rate_limiter = rate_limiter or RateLimiter(db)

    def create_post(
        self,
        author: VoterIdentity,
        *,
        frustration: str,
        identity_text: str,
        category_id: int,
        now: datetime | None = None,
    ) -> Post:
        """Persist a new post after validation and rate limiting.

        Raises:
            InvalidInputError: If a text field is out of bounds.
            NotFoundError: If the category does not exist.
            RateLimitedError: If the author exceeded their hourly post allowance.
        """
        frustration = _clean_text(
            frustration, "Frustration", FRUSTRATION_MIN_LENGTH, FRUSTRATION_MAX_LENGTH
        )
        identity_text = _clean_text(
            identity_text, "Identity", IDENTITY_MIN_LENGTH, IDENTITY_MAX_LENGTH
        )
        category_id = check_id(category_id, "Category id")
        if self.db.get(Category, category_id) is None:
            raise NotFoundError("Category not found")

        now = as_utc(now or utcnow())
        try:
            self.rate_limiter.check(author, RateAction.POST, now=now)
            author_id, anonymous_id = identity_columns(author)
            post = Post(
                frustration=frustration,
                identity=identity_text,
                category_id=category_id,
                author_id=author_id,
                anonymous_id=anonymous_id,
                upvotes=0,
                downvotes=0,
                score=0,
                hot_score=hot_score(0, now),
                comment_count=0,
                created_at=now,
            )
            self.db.add(post)
            self.rate_limiter.record(author, RateAction.POST, now=now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(post)
        logger.info("Post %s created by %s", post.id, author.actor_key)
        return post

    def get_post(self, post_id: int) -> Post:
        """Return a post by id or raise :class:`NotFoundError`."""
        post = self.db.get(Post, check_id(post_id, "Post id"))
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _comment_depth(self, comment: Comment) -> int:
        depth = 0
        while comment.parent_id is not None:
            depth += 1
            parent = self.db.get(Comment, comment.parent_id)
            if parent is None:
                break
            comment = parent
        return depth

    def create_comment(
        self,
        author: VoterIdentity,
        *,
        post_id: int,
        content: str,
        parent_id: int | None = None,
        now: datetime | None = None,
    ) -> Comment:
        """Persist a comment and bump its post's comment count.

        Raises:
            InvalidInputError: If the content is out of bounds, the parent is on
                another post, or the reply would nest too deeply.
            NotFoundError: If the post or the parent comment does not exist.
            RateLimitedError: If the author exceeded their hourly comment allowance.
        """
        content = _clean_text(content, "Comment", COMMENT_MIN_LENGTH, COMMENT_MAX_LENGTH)
        self.get_post(post_id)

        if parent_id is not None:
            parent_id = check_id(parent_id, "Parent comment id")
            parent = self.db.get(Comment, parent_id)
            if parent is None:
                raise NotFoundError("Parent comment not found")
            if parent.post_id != post_id:
                raise InvalidInputError("Parent comment belongs to a different post")
            if self._comment_depth(parent) + 1 > settings.max_comment_depth:
                raise InvalidInputError("Replies are nested too deeply")

        now = as_utc(now or utcnow())
        try:
            self.rate_limiter.check(author, RateAction.COMMENT, now=now)
            author_id, anonymous_id = identity_columns(author)
            comment = Comment(
                content=content,
                post_id=post_id,
                parent_id=parent_id,
                author_id=author_id,
                anonymous_id=anonymous_id,
                upvotes=0,
                downvotes=0,
                score=0,
                created_at=now,
            )
            self.db.add(comment)
            self.db.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(comment_count=Post.comment_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.rate_limiter.record(author, RateAction.COMMENT, now=now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(comment)
        logger.info("Comment %s on post %s created by %s", comment.id, post_id, author.actor_key)
        return comment

    def list_comments(self, post_id: int) -> list[CommentThread]:
        """Return a post's top-level comments by score, each with its direct replies."""
        self.get_post(post_id)
        comments = self.db.scalars(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.score.desc(), Comment.created_at.asc(), Comment.id.asc())
        ).all()

        threads: dict[int, CommentThread] = {}
        for comment in comments:
            if comment.parent_id is None:
                threads[comment.id] = CommentThread(comment)
        for comment in comments:
            if comment.parent_id in threads:
                threads[comment.parent_id].replies.append(comment)
        return list(threads.values())

    def get_profile(self, user_id: int) -> UserProfile:
        """Return a registered user with their content counts."""
        user_id = check_id(user_id, "User id")
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        post_count = self.db.scalar(
            select(func.count(Post.id)).where(Post.author_id == user_id)
        )
        comment_count = self.db.scalar(
            select(func.count(Comment.id)).where(Comment.author_id == user_id)
        )
        return UserProfile(user=user, post_count=post_count or 0, comment_count=comment_count or 0)
