"""In-memory password reset token repository."""

import asyncio
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from authority.domain.entities import PasswordResetToken


class InMemoryPasswordResetTokenRepository:
    """PasswordResetTokenRepository backed by a dict keyed on the token id."""

    def __init__(self) -> None:
        self._tokens: dict[UUID, PasswordResetToken] = {}
        self._lock = asyncio.Lock()

    async def save(self, token: PasswordResetToken) -> None:
        async with self._lock:
            self._tokens[token.id] = replace(token)

    async def find_by_token(self, token: str) -> PasswordResetToken | None:
        stored = next((t for t in self._tokens.values() if t.token == token), None)
        return replace(stored) if stored else None

    async def mark_as_used(self, token_id: UUID, now: datetime) -> bool:
        async with self._lock:
            stored = self._tokens.get(token_id)
            if stored is None or stored.is_used:
                return False
            stored.is_used = True
            stored.used_at = now
            return True

    async def invalidate_all_for_user(self, user_id: UUID, now: datetime) -> int:
        async with self._lock:
            count = 0
            for stored in self._tokens.values():
                if stored.user_id == user_id and not stored.is_used:
                    stored.is_used = True
                    stored.used_at = now
                    count += 1
            return count

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [k for k, t in self._tokens.items() if t.is_expired(now)]
            for key in expired:
                del self._tokens[key]
            return len(expired)
