# tests/services/test_content.py
"""Tests for post and comment creation."""

import pytest

from ventboard.core.errors import InvalidInputError, NotFoundError
from ventboard.models import Post
from ventboard.services.content import ContentService
from ventboard.services.identity import Anonymous, Registered
from ventboard.services.ranking import hot_score
from ventboard.services.votes import VoteLedger


def test_new_post_starts_at_zero(db_session, test_post, test_user) -> None:
    """A fresh post has no votes and a hot score from its age alone."""
    assert (test_post.upvotes, test_post.downvotes, test_post.score) == (0, 0, 0)
    assert test_post.comment_count == 0
    assert test_post.author_id == test_user.id
    assert test_post.anonymous_id is None
    assert test_post.hot_score == pytest.approx(hot_score(0, test_post.created_at))


def test_anonymous_post_records_anonymous_id(db_session, category) -> None:
    post = ContentService(db_session).create_post(
        Anonymous("visitor-x"),
        frustration="  Printer jammed again  ",
        identity_text="office worker",
        category_id=category.id,
    )
    assert post.anonymous_id == "visitor-x"
    assert post.author_id is None
    assert post.frustration == "Printer jammed again"


@pytest.mark.parametrize(
    ("frustration", "identity_text"),
    [("no", "someone"), ("   ", "someone"), ("x" * 501, "someone"), ("Long enough text", ""), ("Long enough", "y" * 101)],
)
def test_post_text_bounds(db_session, category, frustration, identity_text) -> None:
    with pytest.raises(InvalidInputError):
        ContentService(db_session).create_post(
            Anonymous("visitor-x"),
            frustration=frustration,
            identity_text=identity_text,
            category_id=category.id,
        )


def test_post_unknown_category(db_session, category) -> None:
    with pytest.raises(NotFoundError):
        ContentService(db_session).create_post(
            Anonymous("visitor-x"),
            frustration="Nothing works today",
            identity_text="someone",
            category_id=999,
        )


def test_comment_bumps_comment_count(db_session, test_post) -> None:
    content = ContentService(db_session)
    content.create_comment(Anonymous("a"), post_id=test_post.id, content="Relatable")
    content.create_comment(Anonymous("b"), post_id=test_post.id, content="Same here")

    assert db_session.get(Post, test_post.id).comment_count == 2


def test_replies_nest_two_levels(db_session, test_post) -> None:
    content = ContentService(db_session)
    top = content.create_comment(Anonymous("a"), post_id=test_post.id, content="Top level")
    reply = content.create_comment(
        Anonymous("b"), post_id=test_post.id, content="First reply", parent_id=top.id
    )
    nested = content.create_comment(
        Anonymous("c"), post_id=test_post.id, content="Second level", parent_id=reply.id
    )
    assert nested.parent_id == reply.id

    with pytest.raises(InvalidInputError):
        content.create_comment(
            Anonymous("d"), post_id=test_post.id, content="Too deep", parent_id=nested.id
        )


def test_reply_must_share_post(db_session, test_post, make_post) -> None:
    content = ContentService(db_session)
    other_post = make_post()
    top = content.create_comment(Anonymous("a"), post_id=other_post.id, content="Elsewhere")

    with pytest.raises(InvalidInputError):
        content.create_comment(
            Anonymous("b"), post_id=test_post.id, content="Wrong thread", parent_id=top.id
        )
    with pytest.raises(NotFoundError):
        content.create_comment(
            Anonymous("b"), post_id=test_post.id, content="Missing parent", parent_id=999
        )


def test_comment_on_missing_post(db_session) -> None:
    with pytest.raises(NotFoundError):
        ContentService(db_session).create_comment(Anonymous("a"), post_id=999, content="Hello")


def test_out_of_range_ids_rejected(db_session, test_post, category) -> None:
    """Ids past the INTEGER range never reach the database."""
    content = ContentService(db_session)
    huge = 10**20
    with pytest.raises(InvalidInputError):
        content.get_post(huge)
    with pytest.raises(InvalidInputError):
        content.create_comment(Anonymous("a"), post_id=huge, content="Hello")
    with pytest.raises(InvalidInputError):
        content.create_comment(
            Anonymous("a"), post_id=test_post.id, content="Hello", parent_id=huge
        )
    with pytest.raises(InvalidInputError):
        content.create_post(
            Anonymous("a"), frustration="Too big", identity_text="someone", category_id=huge
        )
    with pytest.raises(InvalidInputError):
        content.get_profile(huge)


def test_list_comments_threads_by_score(db_session, test_post) -> None:
    content = ContentService(db_session)
    first = content.create_comment(Anonymous("a"), post_id=test_post.id, content="Posted first")
    second = content.create_comment(Anonymous("b"), post_id=test_post.id, content="Posted second")
    reply = content.create_comment(
        Anonymous("c"), post_id=test_post.id, content="A reply", parent_id=first.id
    )
    VoteLedger(db_session).cast(Anonymous("voter"), "comment", second.id, 1)

    threads = content.list_comments(test_post.id)
    assert [thread.comment.id for thread in threads] == [second.id, first.id]
    assert [r.id for r in threads[1].replies] == [reply.id]


def test_profile_counts_content(db_session, test_post, test_user) -> None:
    content = ContentService(db_session)
    content.create_comment(Registered(test_user.id), post_id=test_post.id, content="My own post")

    profile = content.get_profile(test_user.id)
    assert (profile.post_count, profile.comment_count) == (1, 1)
    with pytest.raises(NotFoundError):
        content.get_profile(999)
