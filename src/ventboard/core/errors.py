"""Domain exceptions raised by the vote and reputation engine.

Every error carries the HTTP status it maps to, a short machine readable
``code`` and a human readable ``detail``. The FastAPI application installs a
single handler for :class:`VentboardError` (see ``ventboard.main``).
"""

from __future__ import annotations


class VentboardError(Exception):
    """Base class for all ventboard domain failures."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(VentboardError):
    """Raised when a request carries a value the engine cannot accept."""

    status_code = 400
    code = "invalid_input"


class UnauthenticatedError(VentboardError):
    """Raised when no usable voter or author identity can be resolved."""

    status_code = 401
    code = "unauthenticated"


class NotFoundError(VentboardError):
    """Raised when a referenced post, comment, category or user is missing."""

    status_code = 404
    code = "not_found"


class ConflictError(VentboardError):
    """Raised when a concurrent write collided on the same vote key.

    The transaction has been rolled back; the caller may retry.
    """

    status_code = 409
    code = "conflict"


class RateLimitedError(VentboardError):
    """Raised when an actor exhausted its allowance for the current window."""

    status_code = 429
    code = "rate_limited"

    def __init__(self, detail: str, *, retry_after: int) -> None:
        super().__init__(detail)
        self.retry_after = max(1, int(retry_after))


class InvariantViolationError(VentboardError):
    """Raised when stored aggregates disagree with the rows that justify them.

    This never happens under the transactional discipline of the vote
    ledger. When it does, it is logged and surfaced as a generic failure.
    """

    status_code = 500
    code = "internal_error"
