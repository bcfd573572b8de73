"""Read-side queries."""

from authority.application.queries.auth_queries import (
    ListSessions,
    ValidateAccessToken,
)

__all__ = ["ListSessions", "ValidateAccessToken"]
