"""SessionRepository protocol for device session persistence."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from authority.domain.entities.user_session import UserSession


class SessionRepository(Protocol):
    """Session repository protocol (port).

    Sessions are never deleted by close operations; only the expiry sweep
    removes rows.
    """

    async def save(self, session: UserSession) -> None:
        """Persist a newly opened session."""
        ...

    async def find_by_session_id(self, session_id: str) -> UserSession | None:
        """Find a session by its public id, whatever its state."""
        ...

    async def touch(self, session_id: str, now: datetime) -> bool:
        """Set last_activity_at if the session is active and unexpired.

        Returns:
            bool: False (and no change) otherwise.
        """
        ...

    async def close(self, session_id: str, now: datetime) -> bool:
        """Deactivate one session.

        Returns:
            bool: False if unknown or already inactive.
        """
        ...

    async def close_all_for_user(self, user_id: UUID, now: datetime) -> int:
        """Deactivate every active session of the user."""
        ...

    async def find_active_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> list[UserSession]:
        """Active, unexpired sessions ordered by last_activity_at descending."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose expiry has passed (expires_at <= now)."""
        ...
