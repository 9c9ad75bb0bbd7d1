"""JWT helpers for registered-user bearer tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from ventboard.core.errors import UnauthenticatedError
from ventboard.core.settings import settings
from ventboard.db.ids import MAX_DB_ID


def create_access_token(user_id: int, *, expires_in: timedelta | None = None) -> str:
    """Issue a bearer token naming ``user_id`` as its subject.

    Tokens live ``ACCESS_TOKEN_EXPIRE_MINUTES`` unless ``expires_in`` is given.
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_in or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(user_id), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id carried by a bearer token.

    Raises:
        UnauthenticatedError: If the token is invalid, expired or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise UnauthenticatedError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.isascii() or not subject.isdigit():
        raise UnauthenticatedError("Could not validate credentials")
    user_id = int(subject)
    if not 1 <= user_id <= MAX_DB_ID:
        raise UnauthenticatedError("Could not validate credentials")
    return user_id
