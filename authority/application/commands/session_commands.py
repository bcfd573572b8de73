"""Session management commands."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class RevokeSession:
    """Close one of the user's sessions and revoke its refresh tokens.

    Attributes:
        user_id: User requesting the revocation (must own the session).
        session_id: Public id of the session to close.
        client_ip: Client IP address.
    """

    user_id: UUID
    session_id: str
    client_ip: str | None = None
