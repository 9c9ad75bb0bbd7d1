# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-ventboard-tests")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from ventboard.core.security import create_access_token
from ventboard.db.session import build_engine, create_tables, drop_tables
from ventboard.db.session import get_db as app_get_session
from ventboard.main import app as fastapi_app
from ventboard.models import Category, Post, User
from ventboard.services.content import ContentService
from ventboard.services.identity import Anonymous, Registered, VoterIdentity

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

_ANONYMOUS_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL)
    create_tables(bind=engine)
    try:
        yield engine
    finally:
        drop_tables(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _create_user(db_session: Session, username: str) -> User:
    user = User(username=username, karma=0, post_karma=0, comment_karma=0)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted registered user."""
    return _create_user(db_session, "frustrated_dev")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second registered user."""
    return _create_user(db_session, "tired_parent")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def anon_headers() -> dict[str, str]:
    """Return headers identifying a fresh anonymous visitor."""
    return {"X-Anonymous-Id": f"anon-{next(_ANONYMOUS_COUNTER)}"}


def _anonymous() -> Anonymous:
    """Return a fresh anonymous identity."""
    return Anonymous(f"visitor-{next(_ANONYMOUS_COUNTER)}")


@pytest.fixture()
def category(db_session: Session) -> Category:
    """Create the default test category."""
    category = Category(name="Work", slug="work")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture()
def other_category(db_session: Session) -> Category:
    """Create a second, initially empty category."""
    category = Category(name="Technology", slug="technology")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture()
def make_post(db_session: Session, category: Category) -> Callable[..., Post]:
    """Return a factory creating posts through the content service.

    Each post gets its own anonymous author unless one is given, so the
    posting allowance never interferes with fixtures.
    """
    content = ContentService(db_session)

    def _make_post(
        *,
        author: VoterIdentity | None = None,
        minutes: int = 0,
        category_id: int | None = None,
        frustration: str = "My build broke again for no reason",
    ) -> Post:
        return content.create_post(
            author or _anonymous(),
            frustration=frustration,
            identity_text="a developer",
            category_id=category_id or category.id,
            now=BASE_TIME + timedelta(minutes=minutes),
        )

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a post authored by the primary test user."""
    return make_post(author=Registered(test_user.id))
