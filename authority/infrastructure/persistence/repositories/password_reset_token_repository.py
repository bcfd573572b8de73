"""PasswordResetTokenRepository - SQLAlchemy implementation."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from authority.domain.entities.password_reset_token import PasswordResetToken
from authority.infrastructure.persistence.models.password_reset_token import (
    PasswordResetTokenModel,
)


class PasswordResetTokenRepository:
    """SQLAlchemy implementation of PasswordResetTokenRepository protocol.

    mark_as_used is a conditional UPDATE, so a token can be consumed once
    even under concurrent redemption.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, token: PasswordResetToken) -> None:
        self._session.add(
            PasswordResetTokenModel(
                id=token.id,
                user_id=token.user_id,
                token=token.token,
                expires_at=token.expires_at,
                created_at=token.created_at,
                ip_address=token.ip_address,
                is_used=token.is_used,
                used_at=token.used_at,
            )
        )
        await self._session.commit()

    async def find_by_token(self, token: str) -> PasswordResetToken | None:
        stmt = (
            select(PasswordResetTokenModel)
            .where(PasswordResetTokenModel.token == token)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return PasswordResetToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            expires_at=model.expires_at,
            created_at=model.created_at,
            ip_address=model.ip_address,
            is_used=model.is_used,
            used_at=model.used_at,
        )

    async def mark_as_used(self, token_id: UUID, now: datetime) -> bool:
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.id == token_id,
                PasswordResetTokenModel.is_used.is_(False),
            )
            .values(is_used=True, used_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return (cast(Any, result).rowcount or 0) == 1

    async def invalidate_all_for_user(self, user_id: UUID, now: datetime) -> int:
        stmt = (
            update(PasswordResetTokenModel)
            .where(
                PasswordResetTokenModel.user_id == user_id,
                PasswordResetTokenModel.is_used.is_(False),
            )
            .values(is_used=True, used_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(PasswordResetTokenModel).where(
            PasswordResetTokenModel.expires_at <= now
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0
