"""UserRepository - SQLAlchemy implementation of UserRepository protocol.

Adapter for hexagonal architecture.
Maps between domain User entities and database UserModel rows.
"""

from datetime import datetime, timedelta
from typing import Any, cast
from uuid import UUID

from sqlalchemy import case, func, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from authority.domain.entities.user import User
from authority.domain.errors import DuplicateUserError
from authority.infrastructure.persistence.base import UTCDateTime
from authority.infrastructure.persistence.models.user import UserModel


class UserRepository:
    """SQLAlchemy implementation of UserRepository protocol.

    This class does NOT inherit from the UserRepository protocol (structural
    typing). Uniqueness of email and username is enforced by unique indexes,
    so a concurrent duplicate insert surfaces as DuplicateUserError.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = UserRepository(session)
        ...     user = await repo.find_by_email("jane@example.com")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        stmt = (
            select(UserModel)
            .where(UserModel.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_email(self, email: str) -> User | None:
        stmt = (
            select(UserModel)
            .where(UserModel.email == email.lower())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_username(self, username: str) -> User | None:
        stmt = (
            select(UserModel)
            .where(UserModel.username_normalized == username.lower())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(func.count()).where(UserModel.email == email.lower())
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(func.count()).where(
            UserModel.username_normalized == username.lower()
        )
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def save(self, user: User) -> None:
        """Create new user.

        Raises:
            DuplicateUserError: If the email or username already exists.
        """
        self._session.add(self._to_model(user))
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            field = "email" if "email" in str(e.orig).lower() else "username"
            raise DuplicateUserError(field) from e

    async def record_login_failure(
        self, user_id: UUID, *, now: datetime, threshold: int, window: timedelta
    ) -> bool:
        """Count a failed login in one UPDATE.

        The counter is incremented by the database, so concurrent failures
        are never lost. Reaching the threshold sets locked_until and resets
        the counter in the same statement.
        """
        attempts = UserModel.failed_login_attempts + 1
        reached = attempts >= threshold
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                failed_login_attempts=case((reached, 0), else_=attempts),
                locked_until=case(
                    (reached, literal(now + window, UTCDateTime)),
                    else_=UserModel.locked_until,
                ),
                updated_at=now,
            )
            .returning(UserModel.failed_login_attempts)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        remaining = result.scalar_one_or_none()
        await self._session.commit()
        return remaining == 0

    async def record_login_success(self, user_id: UUID, *, now: datetime) -> None:
        await self._update_columns(
            user_id,
            failed_login_attempts=0,
            locked_until=None,
            last_login_at=now,
            updated_at=now,
        )

    async def update_password(
        self, user_id: UUID, *, password_hash: str, now: datetime
    ) -> None:
        await self._update_columns(user_id, password_hash=password_hash, updated_at=now)

    async def set_email_confirmation_token(
        self, user_id: UUID, *, token: str, now: datetime
    ) -> bool:
        count = await self._update_columns(
            user_id,
            UserModel.email_confirmed.is_(False),
            email_confirmation_token=token,
            updated_at=now,
        )
        return count == 1

    async def confirm_email(self, user_id: UUID, *, token: str, now: datetime) -> bool:
        """Confirm the address; the WHERE clause matches the outstanding token."""
        count = await self._update_columns(
            user_id,
            UserModel.email_confirmed.is_(False),
            UserModel.email_confirmation_token == token,
            email_confirmed=True,
            email_confirmation_token=None,
            updated_at=now,
        )
        return count == 1

    async def _update_columns(
        self, user_id: UUID, *conditions: ColumnElement[bool], **values: Any
    ) -> int:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return cast(Any, result).rowcount or 0

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            username=model.username,
            display_name=model.display_name,
            password_hash=model.password_hash,
            created_at=model.created_at,
            updated_at=model.updated_at,
            email_confirmed=model.email_confirmed,
            email_confirmation_token=model.email_confirmation_token,
            two_factor_secret=model.two_factor_secret,
            failed_login_attempts=model.failed_login_attempts,
            locked_until=model.locked_until,
            last_login_at=model.last_login_at,
        )

    def _to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email.lower(),
            username=user.username,
            username_normalized=user.username.lower(),
            display_name=user.display_name,
            password_hash=user.password_hash,
            email_confirmed=user.email_confirmed,
            email_confirmation_token=user.email_confirmation_token,
            two_factor_secret=user.two_factor_secret,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
