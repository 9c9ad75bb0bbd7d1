# tests/services/test_feed.py
"""Tests for feed ordering and cursor pagination."""

import base64
import json

import pytest

from ventboard.core.errors import InvalidInputError, NotFoundError
from ventboard.db.ids import MAX_DB_ID
from ventboard.services.feed import (
    FeedOrder,
    FeedService,
    HotCursor,
    parse_cursor,
    parse_hot_cursor,
)
from ventboard.services.identity import Anonymous, Registered
from ventboard.services.votes import VoteLedger

STAMP = "2026-03-01T12:00:00+00:00"


def _ids(page) -> list[int]:
    return [post.id for post in page.posts]


def _collect(feed: FeedService, order: FeedOrder, limit: int) -> list[list[int]]:
    pages = []
    cursor = None
    while True:
        page = feed.list_posts(order, limit=limit, cursor=cursor)
        pages.append(_ids(page))
        if page.next_cursor is None:
            return pages
        cursor = page.next_cursor


def _token(payload: object) -> str:
    raw = json.dumps(payload).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_new_feed_is_newest_first(db_session, make_post) -> None:
    posts = [make_post(minutes=minute) for minute in range(5)]
    page = FeedService(db_session).list_new()

    assert _ids(page) == [post.id for post in reversed(posts)]
    assert page.next_cursor is None


def test_new_feed_breaks_ties_by_id(db_session, make_post) -> None:
    """Posts created at the same instant order by id descending."""
    first = make_post(minutes=3)
    second = make_post(minutes=3)
    page = FeedService(db_session).list_new()

    assert _ids(page) == [second.id, first.id]


def test_new_feed_pages_are_disjoint(db_session, make_post) -> None:
    posts = [make_post(minutes=minute) for minute in range(5)]
    pages = _collect(FeedService(db_session), FeedOrder.NEW, limit=2)

    expected = [post.id for post in reversed(posts)]
    assert pages == [expected[0:2], expected[2:4], expected[4:5]]


def test_exactly_full_last_page_has_no_cursor(db_session, make_post) -> None:
    for minute in range(4):
        make_post(minutes=minute)
    feed = FeedService(db_session)

    first = feed.list_new(limit=2)
    second = feed.list_new(limit=2, cursor=first.next_cursor)

    assert first.next_cursor == str(first.posts[-1].id)
    assert len(second.posts) == 2
    assert second.next_cursor is None


def test_new_post_between_requests_does_not_leak(db_session, make_post) -> None:
    """A post inserted after page one never appears on a later page."""
    older = [make_post(minutes=minute) for minute in range(3)]
    feed = FeedService(db_session)
    first = feed.list_new(limit=2)

    newest = make_post(minutes=10)
    second = feed.list_new(limit=2, cursor=first.next_cursor)

    assert _ids(second) == [older[0].id]
    assert newest.id not in _ids(first) + _ids(second)


def test_hot_feed_prefers_voted_posts(db_session, make_post) -> None:
    """Score outweighs a small age difference in the hot ordering."""
    old_popular = make_post(minutes=0)
    sunk = make_post(minutes=30)
    fresh = make_post(minutes=60)

    ledger = VoteLedger(db_session)
    for voter in ("a", "b", "c"):
        ledger.cast(Anonymous(voter), "post", old_popular.id, 1)
    for voter in ("d", "e"):
        ledger.cast(Anonymous(voter), "post", sunk.id, -1)

    feed = FeedService(db_session)
    assert _ids(feed.list_hot()) == [old_popular.id, fresh.id, sunk.id]
    assert _ids(feed.list_new()) == [fresh.id, sunk.id, old_popular.id]


def test_hot_feed_pages_cover_every_post_once(db_session, make_post) -> None:
    posts = [make_post(minutes=minute * 5) for minute in range(6)]
    ledger = VoteLedger(db_session)
    ledger.cast(Anonymous("a"), "post", posts[0].id, 1)
    ledger.cast(Anonymous("b"), "post", posts[0].id, 1)
    ledger.cast(Anonymous("c"), "post", posts[3].id, -1)

    pages = _collect(FeedService(db_session), FeedOrder.HOT, limit=4)
    flat = [post_id for page in pages for post_id in page]

    assert len(pages) == 2
    assert sorted(flat) == sorted(post.id for post in posts)
    assert len(set(flat)) == len(flat)


@pytest.mark.parametrize("limit", [0, -1, 51])
def test_limit_out_of_range_rejected(db_session, limit) -> None:
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_new(limit=limit)


def test_limit_bounds_accepted(db_session, make_post) -> None:
    make_post()
    feed = FeedService(db_session)
    assert len(feed.list_new(limit=1).posts) == 1
    assert len(feed.list_hot(limit=50).posts) == 1


@pytest.mark.parametrize(
    "cursor", ["abc", "-3", "1.5", "0", " 7", str(MAX_DB_ID + 1), "99999999999999999999"]
)
def test_malformed_cursor_rejected(db_session, cursor) -> None:
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_new(cursor=cursor)


def test_cursor_for_missing_post_rejected(db_session, make_post) -> None:
    make_post()
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_new(cursor="999")


def test_parse_cursor_first_page_values() -> None:
    assert parse_cursor(None) is None
    assert parse_cursor("") is None
    assert parse_cursor("42") == 42


def test_category_feed_filters_posts(db_session, make_post, other_category) -> None:
    make_post(minutes=0)
    tech = make_post(minutes=1, category_id=other_category.id)
    feed = FeedService(db_session)

    page = feed.list_by_category("technology")
    assert _ids(page) == [tech.id]
    assert _ids(feed.list_new(category_slug="technology")) == [tech.id]


def test_empty_category_returns_empty_page(db_session, other_category) -> None:
    page = FeedService(db_session).list_by_category("technology", order="hot")
    assert page.posts == []
    assert page.next_cursor is None


def test_unknown_category_not_found(db_session) -> None:
    with pytest.raises(NotFoundError):
        FeedService(db_session).list_by_category("nope")


@pytest.mark.parametrize("slug", [None, "", "   "])
def test_missing_category_slug_rejected(db_session, slug) -> None:
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_by_category(slug)


def test_invalid_order_rejected(db_session) -> None:
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_posts("top")


def test_user_feed_lists_only_their_posts(db_session, make_post, test_user) -> None:
    mine = make_post(author=Registered(test_user.id), minutes=1)
    make_post(minutes=2)

    page = FeedService(db_session).list_by_user(test_user.id)
    assert _ids(page) == [mine.id]

    with pytest.raises(NotFoundError):
        FeedService(db_session).list_by_user(999)


def _upvote(db_session, post, voters: int) -> None:
    ledger = VoteLedger(db_session)
    for index in range(voters):
        ledger.cast(Anonymous(f"fan-{post.id}-{index}"), "post", post.id, 1)


def test_hot_page_not_repeated_after_anchor_is_upvoted(db_session, make_post) -> None:
    """Votes on the last served post do not pull page one back in."""
    posts = [make_post(minutes=hour * 60) for hour in range(6)]
    feed = FeedService(db_session)

    first = feed.list_hot(limit=3)
    assert _ids(first) == [posts[5].id, posts[4].id, posts[3].id]

    _upvote(db_session, posts[3], voters=12)
    assert _ids(feed.list_hot(limit=1)) == [posts[3].id]

    second = feed.list_hot(limit=3, cursor=first.next_cursor)
    assert _ids(second) == [posts[2].id, posts[1].id, posts[0].id]
    assert second.next_cursor is None


def test_hot_page_not_repeated_after_served_post_sinks(db_session, make_post) -> None:
    """A post from the previous page that drops below the cursor stays out."""
    posts = [make_post(minutes=hour * 60) for hour in range(6)]
    feed = FeedService(db_session)
    first = feed.list_hot(limit=3)

    # Two downvotes drop it between the two oldest posts.
    ledger = VoteLedger(db_session)
    for voter in ("x", "y"):
        ledger.cast(Anonymous(voter), "post", posts[4].id, -1)
    assert _ids(feed.list_hot())[-2:] == [posts[4].id, posts[0].id]

    second = feed.list_hot(limit=3, cursor=first.next_cursor)
    assert _ids(second) == [posts[2].id, posts[1].id, posts[0].id]
    assert not set(_ids(first)) & set(_ids(second))


def test_hot_cursor_carries_the_served_sort_key(db_session, make_post) -> None:
    posts = [make_post(minutes=minute) for minute in range(3)]
    first = FeedService(db_session).list_hot(limit=2)

    key = parse_hot_cursor(first.next_cursor)
    assert key.post_id == posts[1].id
    assert key.hot_score == posts[1].hot_score
    assert key.seen == (posts[2].id, posts[1].id)
    assert HotCursor.decode(key.encode()) == key


@pytest.mark.parametrize(
    "cursor",
    [
        "abc",
        "999",
        "x" * 5000,
        _token([]),
        _token({"h": 1}),
        _token({"h": "1", "t": STAMP, "i": 1}),
        _token({"h": True, "t": STAMP, "i": 1}),
        _token({"h": float("nan"), "t": STAMP, "i": 1}),
        _token({"h": 1, "t": "not-a-date", "i": 1}),
        _token({"h": 1, "t": STAMP, "i": 10**20}),
        _token({"h": 1, "t": STAMP, "i": 1, "s": [0]}),
        _token({"h": 1, "t": STAMP, "i": 1, "s": list(range(1, 60))}),
    ],
)
def test_malformed_hot_cursor_rejected(db_session, make_post, cursor) -> None:
    make_post()
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_hot(cursor=cursor)


def test_hot_cursor_is_not_a_new_cursor(db_session, make_post) -> None:
    for minute in range(3):
        make_post(minutes=minute)
    feed = FeedService(db_session)

    hot_cursor = feed.list_hot(limit=1).next_cursor
    with pytest.raises(InvalidInputError):
        feed.list_new(cursor=hot_cursor)


def test_user_feed_rejects_out_of_range_id(db_session) -> None:
    with pytest.raises(InvalidInputError):
        FeedService(db_session).list_by_user(MAX_DB_ID + 1)
