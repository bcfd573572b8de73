"""Read-side queries for sessions and access tokens.

Queries are immutable, keyword-only requests for data. They never change
persistent state, apart from the activity touch that validating an access
token records on its session.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class ListSessions:
    """List the user's active sessions.

    Attributes:
        user_id: Owner of the sessions.
        current_session_id: Session of the caller, flagged as current.
    """

    user_id: UUID
    current_session_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class ValidateAccessToken:
    """Verify an access token and resolve who it belongs to."""

    access_token: str
