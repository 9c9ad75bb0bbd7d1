"""Bounds shared by every integer primary key."""

from __future__ import annotations

from ventboard.core.errors import InvalidInputError

# Largest value an INTEGER key column holds on every supported backend.
MAX_DB_ID = 2**31 - 1


def check_id(value: object, label: str = "Identifier") -> int:
    """Return ``value`` if it is a usable primary key, else raise InvalidInputError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{label} must be an integer")
    if not 1 <= value <= MAX_DB_ID:
        raise InvalidInputError(f"{label} must be between 1 and {MAX_DB_ID}")
    return value
