"""Refresh token domain entity.

A refresh token is an opaque credential exchanged for a new access/refresh
pair. Tokens form rotation chains: every token carries the id of the chain's
root token (chain_id) and, once rotated, a forward pointer to its successor
(replaced_by_token).

State machine:
    ACTIVE -> ROTATED (used, revoked, has successor)
    ACTIVE -> REVOKED (terminal)
    any    -> EXPIRED (terminal, derived from the clock)
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class RefreshTokenState(str, Enum):
    """Lifecycle state of a refresh token at a given instant."""

    ACTIVE = "active"
    ROTATED = "rotated"
    REVOKED = "revoked"
    EXPIRED = "expired"


@dataclass(slots=True, kw_only=True)
class RefreshToken:
    """Refresh token entity.

    Attributes:
        id: Token row identifier.
        user_id: Owning user.
        token: Opaque token value presented by the client (unique).
        jwt_id: jti of the access token minted alongside this token.
        chain_id: Id of the root token of this rotation chain.
        session_id: Session opened by the login that started the chain.
        expires_at: Hard expiry; now >= expires_at means expired.
        created_at: Issuance time.
        created_by_ip: Client IP that caused issuance.
        is_used: Set once the token has been exchanged.
        is_revoked: Set when the token can no longer be exchanged.
        revoked_at: When it was revoked.
        revoked_by_ip: Client IP that caused revocation.
        revoked_reason: Why it was revoked.
        replaced_by_token: Successor token value after rotation.
    """

    id: UUID
    user_id: UUID
    token: str
    jwt_id: str
    chain_id: UUID
    expires_at: datetime
    created_at: datetime
    session_id: str | None = None
    created_by_ip: str | None = None
    is_used: bool = False
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_by_ip: str | None = None
    revoked_reason: str | None = None
    replaced_by_token: str | None = None

    def is_expired(self, now: datetime) -> bool:
        """Check expiry (zero tolerance)."""
        return now >= self.expires_at

    def is_active(self, now: datetime) -> bool:
        """Active iff not revoked and not expired."""
        return not self.is_revoked and not self.is_expired(now)

    def state(self, now: datetime) -> RefreshTokenState:
        """Derive the lifecycle state at the given instant."""
        if self.is_expired(now):
            return RefreshTokenState.EXPIRED
        if self.replaced_by_token is not None:
            return RefreshTokenState.ROTATED
        if self.is_revoked:
            return RefreshTokenState.REVOKED
        return RefreshTokenState.ACTIVE

    def revoke(self, now: datetime, *, reason: str, client_ip: str | None) -> bool:
        """Revoke the token.

        Returns:
            bool: False if it was already revoked (no-op).
        """
        if self.is_revoked:
            return False
        self.is_revoked = True
        self.revoked_at = now
        self.revoked_reason = reason
        self.revoked_by_ip = client_ip
        return True
