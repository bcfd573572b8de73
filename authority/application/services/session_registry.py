"""Session registry.

Tracks user-visible device sessions, one per login. Sessions are closed, never
deleted, except by the expiry sweep; that keeps an audit trail of past
logins. The registry knows nothing about refresh tokens.
"""

from datetime import timedelta
from uuid import UUID

from authority.domain.entities import UserSession
from authority.domain.protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    LoggerProtocol,
    SecretTokenGeneratorProtocol,
    SessionRepository,
)


class SessionRegistry:
    """Open, touch, close, list and sweep device sessions."""

    def __init__(
        self,
        *,
        session_repo: SessionRepository,
        clock: ClockProtocol,
        id_generator: IdGeneratorProtocol,
        token_generator: SecretTokenGeneratorProtocol,
        logger: LoggerProtocol,
        lifetime: timedelta,
        remember_me_lifetime: timedelta,
    ) -> None:
        self._repo = session_repo
        self._clock = clock
        self._ids = id_generator
        self._tokens = token_generator
        self._logger = logger
        self._lifetime = lifetime
        self._remember_me_lifetime = remember_me_lifetime

    async def open(
        self,
        user_id: UUID,
        *,
        client_ip: str | None = None,
        user_agent: str | None = None,
        device_info: str | None = None,
        remember_me: bool = False,
    ) -> UserSession:
        now = self._clock.now()
        lifetime = self._remember_me_lifetime if remember_me else self._lifetime
        session = UserSession(
            id=self._ids.new_id(),
            session_id=self._tokens.new_token(),
            user_id=user_id,
            ip_address=client_ip,
            user_agent=user_agent,
            device_info=device_info,
            last_activity_at=now,
            expires_at=now + lifetime,
            created_at=now,
        )
        await self._repo.save(session)
        self._logger.info("session_opened", user_id=str(user_id), client_ip=client_ip)
        return session

    async def get(self, session_id: str) -> UserSession | None:
        return await self._repo.find_by_session_id(session_id)

    async def touch(self, session_id: str) -> bool:
        """Record activity. No-op for closed or expired sessions."""
        return await self._repo.touch(session_id, self._clock.now())

    async def close(self, session_id: str) -> bool:
        """Deactivate a session. Closing twice is a no-op."""
        return await self._repo.close(session_id, self._clock.now())

    async def close_all_for_user(self, user_id: UUID) -> int:
        count = await self._repo.close_all_for_user(user_id, self._clock.now())
        self._logger.info("sessions_closed", user_id=str(user_id), count=count)
        return count

    async def list_active(self, user_id: UUID) -> list[UserSession]:
        """Valid sessions, most recently active first."""
        return await self._repo.find_active_by_user_id(user_id, self._clock.now())

    async def sweep_expired(self) -> int:
        return await self._repo.delete_expired(self._clock.now())
