"""In-memory session repository."""

import asyncio
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from authority.domain.entities import UserSession


class InMemorySessionRepository:
    """SessionRepository backed by a dict keyed on the public session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}
        self._lock = asyncio.Lock()

    async def save(self, session: UserSession) -> None:
        async with self._lock:
            self._sessions[session.session_id] = replace(session)

    async def find_by_session_id(self, session_id: str) -> UserSession | None:
        stored = self._sessions.get(session_id)
        return replace(stored) if stored else None

    async def touch(self, session_id: str, now: datetime) -> bool:
        async with self._lock:
            stored = self._sessions.get(session_id)
            return stored.touch(now) if stored else False

    async def close(self, session_id: str, now: datetime) -> bool:
        async with self._lock:
            stored = self._sessions.get(session_id)
            return stored.close(now) if stored else False

    async def close_all_for_user(self, user_id: UUID, now: datetime) -> int:
        async with self._lock:
            return sum(
                s.close(now) for s in self._sessions.values() if s.user_id == user_id
            )

    async def find_active_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> list[UserSession]:
        active = [
            replace(s)
            for s in self._sessions.values()
            if s.user_id == user_id and s.is_valid(now)
        ]
        return sorted(active, key=lambda s: s.last_activity_at, reverse=True)

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [k for k, s in self._sessions.items() if s.is_expired(now)]
            for key in expired:
                del self._sessions[key]
            return len(expired)
