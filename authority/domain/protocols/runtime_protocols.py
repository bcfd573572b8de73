"""Clock, id and secret-token generation ports.

Injected everywhere time, identifiers or random token values are needed, so
tests can run on a fake clock with predictable ids.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class ClockProtocol(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current time (timezone-aware, UTC)."""
        ...


class IdGeneratorProtocol(Protocol):
    """Source of row identifiers and JWT ids."""

    def new_id(self) -> UUID:
        """Return a fresh unique identifier."""
        ...


class SecretTokenGeneratorProtocol(Protocol):
    """Source of unguessable opaque token values."""

    def new_token(self) -> str:
        """Return a fresh URL-safe random token."""
        ...
