"""In-memory refresh token repository."""

import asyncio
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from authority.domain.entities import RefreshToken


class InMemoryRefreshTokenRepository:
    """RefreshTokenRepository backed by a dict keyed on the token value."""

    def __init__(self) -> None:
        self._tokens: dict[str, RefreshToken] = {}
        self._lock = asyncio.Lock()

    async def save(self, token: RefreshToken) -> None:
        async with self._lock:
            if token.token in self._tokens:
                raise ValueError("duplicate refresh token value")
            self._tokens[token.token] = replace(token)

    async def find_by_token(self, token: str) -> RefreshToken | None:
        stored = self._tokens.get(token)
        return replace(stored) if stored else None

    async def rotate(
        self,
        token_id: UUID,
        successor: RefreshToken,
        *,
        now: datetime,
        client_ip: str | None,
        reason: str,
    ) -> bool:
        async with self._lock:
            stored = self._find_by_id(token_id)
            if stored is None or stored.is_used or stored.is_revoked:
                return False
            if successor.token in self._tokens:
                raise ValueError("duplicate refresh token value")
            stored.is_used = True
            stored.replaced_by_token = successor.token
            stored.revoke(now, reason=reason, client_ip=client_ip)
            self._tokens[successor.token] = replace(successor)
            return True

    async def revoke(
        self, token: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> bool:
        async with self._lock:
            stored = self._tokens.get(token)
            if stored is None:
                return False
            return stored.revoke(now, reason=reason, client_ip=client_ip)

    async def revoke_chain(
        self, chain_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            lambda t: t.chain_id == chain_id, now, client_ip, reason
        )

    async def revoke_all_for_user(
        self, user_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            lambda t: t.user_id == user_id, now, client_ip, reason
        )

    async def revoke_by_session(
        self, session_id: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            lambda t: t.session_id == session_id, now, client_ip, reason
        )

    async def find_by_user_id(self, user_id: UUID) -> list[RefreshToken]:
        tokens = [replace(t) for t in self._tokens.values() if t.user_id == user_id]
        return sorted(tokens, key=lambda t: t.created_at)

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [k for k, t in self._tokens.items() if t.is_expired(now)]
            for key in expired:
                del self._tokens[key]
            return len(expired)

    def _find_by_id(self, token_id: UUID) -> RefreshToken | None:
        return next((t for t in self._tokens.values() if t.id == token_id), None)

    async def _revoke_where(
        self,
        predicate: Callable[[RefreshToken], bool],
        now: datetime,
        client_ip: str | None,
        reason: str,
    ) -> int:
        async with self._lock:
            return sum(
                t.revoke(now, reason=reason, client_ip=client_ip)
                for t in self._tokens.values()
                if predicate(t)
            )
