"""Voter and author identities.

Every vote and every piece of content is attributed to exactly one of a
registered user or an anonymous browser id. The two cases are distinct
types so the exclusivity holds by construction.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from ventboard.core.errors import InvalidInputError

_ANONYMOUS_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass(frozen=True)
class Registered:
    """A signed-in account."""

    user_id: int

    @property
    def actor_key(self) -> str:
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class Anonymous:
    """A client-generated anonymous id, usually a UUID kept in local storage."""

    anonymous_id: str

    @property
    def actor_key(self) -> str:
        return f"anon:{self.anonymous_id}"


VoterIdentity = Registered | Anonymous


def anonymous_identity(raw: str) -> Anonymous:
    """Validate a client supplied anonymous id.

    Raises:
        InvalidInputError: If the id is empty, too long or has unsafe characters.
    """
    candidate = raw.strip()
    if not _ANONYMOUS_ID_PATTERN.match(candidate):
        raise InvalidInputError("Anonymous id must be 1-64 characters of letters, digits, '-' or '_'")
    return Anonymous(candidate)


def new_anonymous_id() -> str:
    """Return a fresh anonymous id for a client that has none yet."""
    return str(uuid.uuid4())


def identity_columns(identity: VoterIdentity) -> tuple[int | None, str | None]:
    """Split an identity into its ``(user id, anonymous id)`` column pair."""
    if isinstance(identity, Registered):
        return identity.user_id, None
    return None, identity.anonymous_id
