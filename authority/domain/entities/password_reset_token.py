"""Password reset token domain entity.

Single-use, short-lived token gating a password change. Valid iff not used
and not expired.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class PasswordResetToken:
    """Password reset token entity.

    Attributes:
        id: Token row identifier.
        user_id: User whose password the token may reset.
        token: Opaque token value sent by email (unique).
        expires_at: Hard expiry; now >= expires_at means expired.
        created_at: Issuance time.
        ip_address: Client IP that requested the reset.
        is_used: Set when consumed or invalidated.
        used_at: When it was consumed or invalidated.
    """

    id: UUID
    user_id: UUID
    token: str
    expires_at: datetime
    created_at: datetime
    ip_address: str | None = None
    is_used: bool = False
    used_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_valid(self, now: datetime) -> bool:
        return not self.is_used and not self.is_expired(now)
