"""Feed ranking and cursor pagination.

Two orderings are served:

* ``new``: ``created_at`` descending, ties broken by ``id`` descending.
* ``hot``: stored ``hot_score`` descending, then the ``new`` ordering.

Pages are keyset-paginated and the next page holds exactly the posts that
sort strictly after the last post served. For ``new`` the cursor is that
post's id: its sort key never changes, so posts inserted between requests
can never leak into a later page.

A ``hot_score`` moves with every vote, so a ``hot`` cursor is an opaque token
carrying the last post's sort key as it was served together with the ids of
the page it closes. Votes landing between requests cannot pull an already
served post back into the next page.
"""

from __future__ import annotations

import base64
import binascii
import enum
import json
import math
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from ventboard.core.errors import InvalidInputError, NotFoundError
from ventboard.core.settings import settings
from ventboard.db.ids import MAX_DB_ID, check_id
from ventboard.db.time import as_utc
from ventboard.models import Category, Post, User

MAX_CURSOR_LENGTH = 2048


class FeedOrder(str, enum.Enum):
    """Supported feed orderings."""

    NEW = "new"
    HOT = "hot"


@dataclass(frozen=True)
class FeedPage:
    """One page of posts and the cursor for the page after it."""

    posts: list[Post]
    next_cursor: str | None


@dataclass(frozen=True)
class HotCursor:
    """Sort key of the last post on a ``hot`` page and the ids served on it."""

    hot_score: float
    created_at: datetime
    post_id: int
    seen: tuple[int, ...] = ()

    @classmethod
    def from_page(cls, posts: list[Post]) -> HotCursor:
        last = posts[-1]
        return cls(
            hot_score=float(last.hot_score),
            created_at=as_utc(last.created_at),
            post_id=last.id,
            seen=tuple(post.id for post in posts),
        )

    def encode(self) -> str:
        payload = {
            "h": self.hot_score,
            "t": self.created_at.isoformat(),
            "i": self.post_id,
            "s": list(self.seen),
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @classmethod
    def decode(cls, token: str) -> HotCursor:
        """Parse a token produced by :meth:`encode`.

        Raises:
            InvalidInputError: If the token is not one this service issued.
        """
        if len(token) > MAX_CURSOR_LENGTH or not token.isascii():
            raise InvalidInputError("Malformed cursor")
        try:
            raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
            payload = json.loads(raw)
        except (binascii.Error, ValueError) as err:
            raise InvalidInputError("Malformed cursor") from err
        if not isinstance(payload, dict):
            raise InvalidInputError("Malformed cursor")

        hot_score = payload.get("h")
        if isinstance(hot_score, bool) or not isinstance(hot_score, (int, float)):
            raise InvalidInputError("Malformed cursor")
        if not math.isfinite(hot_score):
            raise InvalidInputError("Malformed cursor")

        created_at = payload.get("t")
        if not isinstance(created_at, str):
            raise InvalidInputError("Malformed cursor")
        try:
            created_at = as_utc(datetime.fromisoformat(created_at))
        except ValueError as err:
            raise InvalidInputError("Malformed cursor") from err

        seen = payload.get("s", [])
        if not isinstance(seen, list) or len(seen) > settings.feed_max_limit:
            raise InvalidInputError("Malformed cursor")
        return cls(
            hot_score=float(hot_score),
            created_at=created_at,
            post_id=check_id(payload.get("i"), "Cursor"),
            seen=tuple(check_id(post_id, "Cursor") for post_id in seen),
        )


def validate_limit(limit: object) -> int:
    """Return ``limit`` if it is an integer within ``1..feed_max_limit``."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInputError("Limit must be an integer")
    if not 1 <= limit <= settings.feed_max_limit:
        raise InvalidInputError(f"Limit must be between 1 and {settings.feed_max_limit}")
    return limit


def parse_cursor(cursor: object) -> int | None:
    """Decode a ``new`` cursor into a post id; ``None`` and ``""`` mean the first page."""
    if cursor is None or cursor == "":
        return None
    if isinstance(cursor, str) and cursor.isascii() and cursor.isdigit() and len(cursor) <= 10:
        cursor = int(cursor)
    if isinstance(cursor, int) and not isinstance(cursor, bool) and 1 <= cursor <= MAX_DB_ID:
        return cursor
    raise InvalidInputError("Malformed cursor")


def parse_hot_cursor(cursor: object) -> HotCursor | None:
    """Decode a ``hot`` cursor token; ``None`` and ``""`` mean the first page."""
    if cursor is None or cursor == "":
        return None
    if not isinstance(cursor, str):
        raise InvalidInputError("Malformed cursor")
    return HotCursor.decode(cursor)


def _after_new_key(created_at: datetime, post_id: int) -> ColumnElement[bool]:
    return or_(
        Post.created_at < created_at,
        and_(Post.created_at == created_at, Post.id < post_id),
    )


def _after_hot_key(key: HotCursor) -> ColumnElement[bool]:
    after = or_(
        Post.hot_score < key.hot_score,
        and_(Post.hot_score == key.hot_score, _after_new_key(key.created_at, key.post_id)),
    )
    if key.seen:
        after = and_(after, Post.id.not_in(key.seen))
    return after


def _order_by(order: FeedOrder) -> tuple[ColumnElement, ...]:
    new_order = (Post.created_at.desc(), Post.id.desc())
    if order is FeedOrder.NEW:
        return new_order
    return (Post.hot_score.desc(), *new_order)


class FeedService:
    """Serves ranked, cursor-paginated post listings."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _category_id(self, slug: str) -> int:
        category_id = self.db.scalar(select(Category.id).where(Category.slug == slug))
        if category_id is None:
            raise NotFoundError("Category not found")
        return category_id

    def _after_cursor(self, order: FeedOrder, cursor: object) -> ColumnElement[bool] | None:
        if order is FeedOrder.HOT:
            key = parse_hot_cursor(cursor)
            return _after_hot_key(key) if key is not None else None

        cursor_id = parse_cursor(cursor)
        if cursor_id is None:
            return None
        anchor = self.db.get(Post, cursor_id)
        if anchor is None:
            raise InvalidInputError("Cursor does not reference a post")
        return _after_new_key(anchor.created_at, anchor.id)

    def _page(
        self,
        order: FeedOrder,
        limit: object,
        cursor: object,
        filters: list[ColumnElement[bool]],
    ) -> FeedPage:
        limit = validate_limit(limit)
        after = self._after_cursor(order, cursor)

        stmt = select(Post).where(*filters)
        if after is not None:
            stmt = stmt.where(after)

        # Probe one extra row so a full last page does not advertise a cursor.
        rows = list(self.db.scalars(stmt.order_by(*_order_by(order)).limit(limit + 1)))
        posts = rows[:limit]
        next_cursor = None
        if len(rows) > limit:
            if order is FeedOrder.HOT:
                next_cursor = HotCursor.from_page(posts).encode()
            else:
                next_cursor = str(posts[-1].id)
        return FeedPage(posts=posts, next_cursor=next_cursor)

    def list_posts(
        self,
        order: FeedOrder | str,
        *,
        limit: object = None,
        cursor: object = None,
        category_slug: str | None = None,
    ) -> FeedPage:
        """Return one page of the feed, optionally restricted to a category."""
        try:
            order = FeedOrder(order)
        except ValueError as err:
            raise InvalidInputError("Sort must be 'new' or 'hot'") from err
        if limit is None:
            limit = settings.feed_default_limit

        filters: list[ColumnElement[bool]] = []
        if category_slug:
            filters.append(Post.category_id == self._category_id(category_slug))
        return self._page(order, limit, cursor, filters)

    def list_new(
        self,
        *,
        limit: object = None,
        cursor: object = None,
        category_slug: str | None = None,
    ) -> FeedPage:
        """Newest posts first."""
        return self.list_posts(FeedOrder.NEW, limit=limit, cursor=cursor, category_slug=category_slug)

    def list_hot(
        self,
        *,
        limit: object = None,
        cursor: object = None,
        category_slug: str | None = None,
    ) -> FeedPage:
        """Highest hot score first."""
        return self.list_posts(FeedOrder.HOT, limit=limit, cursor=cursor, category_slug=category_slug)

    def list_by_category(
        self,
        category_slug: str | None,
        *,
        limit: object = None,
        cursor: object = None,
        order: FeedOrder | str = FeedOrder.NEW,
    ) -> FeedPage:
        """Return one page of a single category's feed.

        Raises:
            InvalidInputError: If the slug is missing.
            NotFoundError: If no category has that slug.
        """
        if category_slug is None or not category_slug.strip():
            raise InvalidInputError("Category slug is required")
        return self.list_posts(order, limit=limit, cursor=cursor, category_slug=category_slug.strip())

    def list_by_user(
        self,
        user_id: int,
        *,
        limit: object = None,
        cursor: object = None,
    ) -> FeedPage:
        """Return a registered user's posts, newest first."""
        user_id = check_id(user_id, "User id")
        if self.db.get(User, user_id) is None:
            raise NotFoundError("User not found")
        if limit is None:
            limit = settings.feed_default_limit
        return self._page(FeedOrder.NEW, limit, cursor, [Post.author_id == user_id])
