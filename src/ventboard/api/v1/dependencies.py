"""Shared API dependencies for identity resolution and services."""

from typing import Annotated

from fastapi import Depends, Header, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ventboard.core.errors import UnauthenticatedError
from ventboard.core.security import decode_access_token
from ventboard.db.ids import MAX_DB_ID
from ventboard.db.session import get_db
from ventboard.models import User
from ventboard.services.content import ContentService
from ventboard.services.feed import FeedService
from ventboard.services.identity import Registered, VoterIdentity, anonymous_identity
from ventboard.services.votes import VoteLedger

# Bearer tokens are optional: anonymous callers identify with a header instead.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

# Primary keys in the path; out-of-range values never reach the database.
IdPath = Annotated[int, Path(ge=1, le=MAX_DB_ID)]


def get_optional_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
    x_anonymous_id: Annotated[str | None, Header()] = None,
) -> VoterIdentity | None:
    """Resolve the caller's identity, if any.

    An explicit ``X-Anonymous-Id`` header wins so that signed-in users can
    still participate anonymously. Otherwise a bearer token must name an
    existing user.

    Raises:
        InvalidInputError: If the anonymous id is malformed.
        UnauthenticatedError: If a bearer token is invalid or names no user.
    """
    if x_anonymous_id is not None:
        return anonymous_identity(x_anonymous_id)

    if credentials is None:
        return None

    user_id = decode_access_token(credentials.credentials)
    if db.get(User, user_id) is None:
        raise UnauthenticatedError("User not found")
    return Registered(user_id)


def get_voter_identity(
    identity: Annotated[VoterIdentity | None, Depends(get_optional_identity)],
) -> VoterIdentity:
    """Require a resolved identity for mutating endpoints."""
    if identity is None:
        raise UnauthenticatedError("Sign in or send an X-Anonymous-Id header")
    return identity


def get_vote_ledger(db: SessionDep) -> VoteLedger:
    """Return a vote ledger bound to the request session."""
    return VoteLedger(db)


def get_feed_service(db: SessionDep) -> FeedService:
    """Return a feed service bound to the request session."""
    return FeedService(db)


def get_content_service(db: SessionDep) -> ContentService:
    """Return a content service bound to the request session."""
    return ContentService(db)


OptionalIdentityDep = Annotated[VoterIdentity | None, Depends(get_optional_identity)]
IdentityDep = Annotated[VoterIdentity, Depends(get_voter_identity)]
VoteLedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]
FeedServiceDep = Annotated[FeedService, Depends(get_feed_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
