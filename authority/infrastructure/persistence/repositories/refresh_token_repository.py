"""RefreshTokenRepository - SQLAlchemy implementation.

Adapter for hexagonal architecture.
Maps between domain RefreshToken entities and RefreshTokenModel rows.

Rotation and revocation are conditional UPDATEs; the affected row count tells
the caller whether its write applied. Two concurrent rotations of the same
token therefore resolve to exactly one winner at the database.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from authority.domain.entities.refresh_token import RefreshToken
from authority.infrastructure.persistence.models.refresh_token import (
    RefreshTokenModel,
)


class RefreshTokenRepository:
    """SQLAlchemy implementation of RefreshTokenRepository protocol.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = RefreshTokenRepository(session)
        ...     token = await repo.find_by_token(value)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def save(self, token: RefreshToken) -> None:
        self._session.add(self._to_model(token))
        await self._session.commit()

    async def find_by_token(self, token: str) -> RefreshToken | None:
        stmt = (
            select(RefreshTokenModel)
            .where(RefreshTokenModel.token == token)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def rotate(
        self,
        token_id: UUID,
        successor: RefreshToken,
        *,
        now: datetime,
        client_ip: str | None,
        reason: str,
    ) -> bool:
        """Retire a token and insert its successor in one transaction.

        The WHERE clause is the compare-and-set: only a token that is still
        unused and unrevoked matches. The successor is inserted before the
        commit, so a failed insert rolls the retirement back with it.
        """
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.id == token_id,
                RefreshTokenModel.is_used.is_(False),
                RefreshTokenModel.is_revoked.is_(False),
            )
            .values(
                is_used=True,
                is_revoked=True,
                revoked_at=now,
                revoked_by_ip=client_ip,
                revoked_reason=reason,
                replaced_by_token=successor.token,
            )
        )
        try:
            result = await self._session.execute(stmt)
            if (cast(Any, result).rowcount or 0) != 1:
                await self._session.rollback()
                return False
            self._session.add(self._to_model(successor))
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return True

    async def revoke(
        self, token: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> bool:
        count = await self._revoke_where(
            RefreshTokenModel.token == token, now, client_ip, reason
        )
        return count > 0

    async def revoke_chain(
        self, chain_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            RefreshTokenModel.chain_id == chain_id, now, client_ip, reason
        )

    async def revoke_all_for_user(
        self, user_id: UUID, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            RefreshTokenModel.user_id == user_id, now, client_ip, reason
        )

    async def revoke_by_session(
        self, session_id: str, *, now: datetime, client_ip: str | None, reason: str
    ) -> int:
        return await self._revoke_where(
            RefreshTokenModel.session_id == session_id, now, client_ip, reason
        )

    async def find_by_user_id(self, user_id: UUID) -> list[RefreshToken]:
        stmt = (
            select(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id)
            .order_by(RefreshTokenModel.created_at.asc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.expires_at <= now)
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    async def _revoke_where(
        self,
        condition: ColumnElement[bool],
        now: datetime,
        client_ip: str | None,
        reason: str,
    ) -> int:
        stmt = (
            update(RefreshTokenModel)
            .where(condition, RefreshTokenModel.is_revoked.is_(False))
            .values(
                is_revoked=True,
                revoked_at=now,
                revoked_by_ip=client_ip,
                revoked_reason=reason,
            )
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    def _to_entity(self, model: RefreshTokenModel) -> RefreshToken:
        return RefreshToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            jwt_id=model.jwt_id,
            chain_id=model.chain_id,
            session_id=model.session_id,
            expires_at=model.expires_at,
            created_at=model.created_at,
            created_by_ip=model.created_by_ip,
            is_used=model.is_used,
            is_revoked=model.is_revoked,
            revoked_at=model.revoked_at,
            revoked_by_ip=model.revoked_by_ip,
            revoked_reason=model.revoked_reason,
            replaced_by_token=model.replaced_by_token,
        )

    def _to_model(self, token: RefreshToken) -> RefreshTokenModel:
        return RefreshTokenModel(
            id=token.id,
            user_id=token.user_id,
            token=token.token,
            jwt_id=token.jwt_id,
            chain_id=token.chain_id,
            session_id=token.session_id,
            expires_at=token.expires_at,
            created_at=token.created_at,
            created_by_ip=token.created_by_ip,
            is_used=token.is_used,
            is_revoked=token.is_revoked,
            revoked_at=token.revoked_at,
            revoked_by_ip=token.revoked_by_ip,
            revoked_reason=token.revoked_reason,
            replaced_by_token=token.replaced_by_token,
        )
