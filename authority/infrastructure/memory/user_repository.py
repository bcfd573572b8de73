"""In-memory user repository."""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from uuid import UUID

from authority.domain.entities import User
from authority.domain.errors import DuplicateUserError


class InMemoryUserRepository:
    """UserRepository backed by dicts, with case-insensitive unique keys.

    Mutations apply to the stored copy under the lock, never to a copy handed
    out earlier.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._by_email: dict[str, UUID] = {}
        self._by_username: dict[str, UUID] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def find_by_email(self, email: str) -> User | None:
        user_id = self._by_email.get(email.lower())
        return await self.find_by_id(user_id) if user_id else None

    async def find_by_username(self, username: str) -> User | None:
        user_id = self._by_username.get(username.lower())
        return await self.find_by_id(user_id) if user_id else None

    async def exists_by_email(self, email: str) -> bool:
        return email.lower() in self._by_email

    async def exists_by_username(self, username: str) -> bool:
        return username.lower() in self._by_username

    async def save(self, user: User) -> None:
        async with self._lock:
            email_key, username_key = user.email.lower(), user.username.lower()
            if email_key in self._by_email:
                raise DuplicateUserError("email")
            if username_key in self._by_username:
                raise DuplicateUserError("username")
            self._users[user.id] = replace(user)
            self._by_email[email_key] = user.id
            self._by_username[username_key] = user.id

    async def record_login_failure(
        self, user_id: UUID, *, now: datetime, threshold: int, window: timedelta
    ) -> bool:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is None:
                return False
            return stored.record_failed_login(now, threshold=threshold, window=window)

    async def record_login_success(self, user_id: UUID, *, now: datetime) -> None:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is not None:
                stored.record_successful_login(now)

    async def update_password(
        self, user_id: UUID, *, password_hash: str, now: datetime
    ) -> None:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is not None:
                stored.change_password(password_hash, now)

    async def set_email_confirmation_token(
        self, user_id: UUID, *, token: str, now: datetime
    ) -> bool:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is None:
                return False
            return stored.issue_email_confirmation(token, now)

    async def confirm_email(self, user_id: UUID, *, token: str, now: datetime) -> bool:
        async with self._lock:
            stored = self._users.get(user_id)
            if stored is None:
                return False
            return stored.confirm_email(token, now)
