"""RefreshTokenRepository protocol for refresh token persistence.

Every state change that can race is expressed as a conditional write that
reports whether it applied, so implementations can make it atomic (a lock in
memory, a conditional UPDATE in SQL).
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from authority.domain.entities.refresh_token import RefreshToken


class RefreshTokenRepository(Protocol):
    """Refresh token repository protocol (port)."""

    async def save(self, token: RefreshToken) -> None:
        """Persist a newly issued token."""
        ...

    async def find_by_token(self, token: str) -> RefreshToken | None:
        """Find a token by its opaque value, whatever its state."""
        ...

    async def rotate(
        self,
        token_id: UUID,
        successor: RefreshToken,
        *,
        now: datetime,
        client_ip: str | None,
        reason: str,
    ) -> bool:
        """Atomically retire a token and store its successor.

        Applies only if the token is neither used nor revoked. Sets is_used,
        is_revoked, revocation metadata and the replaced_by_token pointer
        (successor.token), and inserts the successor, as one unit: if the
        insert fails nothing is written and the error propagates.

        Returns:
            bool: True if this call won the rotation, False otherwise.
        """
        ...

    async def revoke(
        self, token: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> bool:
        """Revoke one token by value.

        Returns:
            bool: False if unknown or already revoked (no-op).
        """
        ...

    async def revoke_chain(
        self, chain_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        """Revoke every not-yet-revoked token of a rotation chain."""
        ...

    async def revoke_all_for_user(
        self, user_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        """Revoke every not-yet-revoked token owned by the user."""
        ...

    async def revoke_by_session(
        self, session_id: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        """Revoke every not-yet-revoked token bound to the session."""
        ...

    async def find_by_user_id(self, user_id: UUID) -> list[RefreshToken]:
        """List all of a user's tokens, oldest first."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens whose expiry has passed (expires_at <= now)."""
        ...
