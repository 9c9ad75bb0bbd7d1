# tests/services/test_ranking.py
"""Tests for the hot ranking formula."""

from datetime import UTC, datetime, timedelta

import pytest

from ventboard.services.ranking import hot_score

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def test_zero_score_at_epoch_is_zero() -> None:
    assert hot_score(0, EPOCH) == 0.0


def test_score_is_logarithmic() -> None:
    """Ten times the score adds one point."""
    assert hot_score(10, EPOCH) == pytest.approx(1.0)
    assert hot_score(100, EPOCH) == pytest.approx(2.0)
    assert hot_score(1, EPOCH) == 0.0


def test_negative_score_ranks_lower() -> None:
    assert hot_score(-10, EPOCH) == pytest.approx(-1.0)
    assert hot_score(-10, EPOCH) < hot_score(0, EPOCH) < hot_score(10, EPOCH)


def test_newer_posts_rank_higher() -> None:
    """One decay period of age is worth one order of magnitude of score."""
    later = EPOCH + timedelta(seconds=45_000)
    assert hot_score(0, later) == pytest.approx(1.0)
    assert hot_score(0, later) == pytest.approx(hot_score(10, EPOCH))


def test_naive_datetimes_are_utc() -> None:
    naive = datetime(2024, 1, 2)
    assert hot_score(5, naive) == hot_score(5, naive.replace(tzinfo=UTC))


def test_custom_epoch_and_decay() -> None:
    created = EPOCH + timedelta(hours=1)
    assert hot_score(0, created, epoch=EPOCH, decay_seconds=3600) == pytest.approx(1.0)
