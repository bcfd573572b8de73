"""SessionRepository - SQLAlchemy implementation of SessionRepository protocol.

Adapter for hexagonal architecture.
Maps between domain UserSession entities and UserSessionModel rows.

Closing a session is a soft delete (is_active=False, ended_at set); only
delete_expired removes rows.
"""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from authority.domain.entities.user_session import UserSession
from authority.infrastructure.persistence.models.user_session import (
    UserSessionModel,
)


class SessionRepository:
    """SQLAlchemy implementation of SessionRepository protocol.

    This class does NOT inherit from SessionRepository protocol
    (Protocol uses structural typing - duck typing with type safety).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as db_session:
        ...     repo = SessionRepository(db_session)
        ...     sessions = await repo.find_active_by_user_id(user_id, now)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def save(self, session: UserSession) -> None:
        self._session.add(self._to_model(session))
        await self._session.commit()

    async def find_by_session_id(self, session_id: str) -> UserSession | None:
        stmt = (
            select(UserSessionModel)
            .where(UserSessionModel.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def touch(self, session_id: str, now: datetime) -> bool:
        """Record activity on a live session.

        Args:
            session_id: Public session id.
            now: Activity time.

        Returns:
            True if the session was active and unexpired.
        """
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.session_id == session_id,
                UserSessionModel.is_active.is_(True),
                UserSessionModel.expires_at > now,
            )
            .values(last_activity_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return (cast(Any, result).rowcount or 0) > 0

    async def close(self, session_id: str, now: datetime) -> bool:
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.session_id == session_id,
                UserSessionModel.is_active.is_(True),
            )
            .values(is_active=False, ended_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return (cast(Any, result).rowcount or 0) > 0

    async def close_all_for_user(self, user_id: UUID, now: datetime) -> int:
        """Deactivate every active session of a user.

        Used by logout-all, password change/reset and theft response.

        Returns:
            Number of sessions closed.
        """
        stmt = (
            update(UserSessionModel)
            .where(
                UserSessionModel.user_id == user_id,
                UserSessionModel.is_active.is_(True),
            )
            .values(is_active=False, ended_at=now)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    async def find_active_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> list[UserSession]:
        stmt = (
            select(UserSessionModel)
            .where(
                UserSessionModel.user_id == user_id,
                UserSessionModel.is_active.is_(True),
                UserSessionModel.expires_at > now,
            )
            .order_by(UserSessionModel.last_activity_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(UserSessionModel).where(UserSessionModel.expires_at <= now)
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    def _to_entity(self, model: UserSessionModel) -> UserSession:
        return UserSession(
            id=model.id,
            session_id=model.session_id,
            user_id=model.user_id,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            device_info=model.device_info,
            last_activity_at=model.last_activity_at,
            expires_at=model.expires_at,
            created_at=model.created_at,
            is_active=model.is_active,
            ended_at=model.ended_at,
        )

    def _to_model(self, session: UserSession) -> UserSessionModel:
        return UserSessionModel(
            id=session.id,
            session_id=session.session_id,
            user_id=session.user_id,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_info=session.device_info,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at,
            created_at=session.created_at,
            is_active=session.is_active,
            ended_at=session.ended_at,
        )
