"""UserSession domain entity.

A user-visible, device-scoped login instance. Its lifecycle is independent of
refresh token rotation: one session can outlive many rotations.

Business Rules:
    - A session is valid while active and not expired
    - Closing a session only deactivates it (kept as audit trail)
    - Activity is recorded only on valid sessions
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class UserSession:
    """Device session entity.

    Attributes:
        id: Row identifier.
        session_id: Opaque public session identifier (unique).
        user_id: Owning user.
        ip_address: Client IP at login.
        user_agent: Client user-agent string at login.
        device_info: Free-form device descriptor.
        last_activity_at: Last authenticated request on this session.
        expires_at: Hard expiry; now >= expires_at means expired.
        created_at: Login time.
        is_active: False once closed.
        ended_at: When the session was closed.
    """

    id: UUID
    session_id: str
    user_id: UUID
    last_activity_at: datetime
    expires_at: datetime
    created_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    device_info: str | None = None
    is_active: bool = True
    ended_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_valid(self, now: datetime) -> bool:
        """Check if the session is usable (active and not expired)."""
        return self.is_active and not self.is_expired(now)

    def touch(self, now: datetime) -> bool:
        """Record activity.

        Returns:
            bool: False (and nothing changes) if the session is not valid.
        """
        if not self.is_valid(now):
            return False
        self.last_activity_at = now
        return True

    def close(self, now: datetime) -> bool:
        """Deactivate the session.

        Returns:
            bool: False if it was already inactive.
        """
        if not self.is_active:
            return False
        self.is_active = False
        self.ended_at = now
        return True
