"""PasswordResetTokenRepository protocol for reset token persistence."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from authority.domain.entities.password_reset_token import PasswordResetToken


class PasswordResetTokenRepository(Protocol):
    """Password reset token repository protocol (port)."""

    async def save(self, token: PasswordResetToken) -> None:
        """Persist a newly issued reset token."""
        ...

    async def find_by_token(self, token: str) -> PasswordResetToken | None:
        """Find a reset token by value, whatever its state."""
        ...

    async def mark_as_used(self, token_id: UUID, now: datetime) -> bool:
        """Atomically mark a token used.

        Returns:
            bool: True only for the call that flipped is_used.
        """
        ...

    async def invalidate_all_for_user(self, user_id: UUID, now: datetime) -> int:
        """Mark every unused token of the user as used."""
        ...

    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens whose expiry has passed (expires_at <= now)."""
        ...
