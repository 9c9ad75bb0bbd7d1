# tests/test_scripts.py
"""Tests for the maintenance and seeding scripts."""

from datetime import timedelta

from sqlalchemy import select, update

from ventboard.db.time import utcnow
from ventboard.models import Category, Post
from ventboard.scripts.init_db import DEFAULT_CATEGORIES, seed_categories
from ventboard.scripts.maintenance import audit_counters, prune_rate_limit_events
from ventboard.services.identity import Anonymous
from ventboard.services.rate_limit import RateAction, RateLimiter


def test_seed_categories_is_idempotent(db_session) -> None:
    seed_categories(db_session)
    seed_categories(db_session)

    slugs = db_session.scalars(select(Category.slug)).all()
    assert sorted(slugs) == sorted(slug for _, slug in DEFAULT_CATEGORIES)


def test_prune_rate_limit_events(db_session) -> None:
    limiter = RateLimiter(db_session)
    limiter.record(Anonymous("old"), RateAction.POST, now=utcnow() - timedelta(hours=3))
    db_session.commit()

    assert prune_rate_limit_events(db_session) == 1


def test_audit_counters_reports_drift(db_session, test_post) -> None:
    assert audit_counters(db_session) == []

    db_session.execute(update(Post).where(Post.id == test_post.id).values(downvotes=4))
    db_session.commit()
    assert len(audit_counters(db_session)) == 1
