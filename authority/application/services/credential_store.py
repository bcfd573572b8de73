"""Credential store.

Owns user identity records and their password hashes. Registration checks
for duplicates up front, but the check is not atomic with the insert, so a
unique-constraint violation at insert time is reported with the very same
ValidationError as the pre-check.

Usage:
    store = CredentialStore(
        user_repo=repo, clock=clock, id_generator=ids, token_generator=tokens
    )

    user = await store.find_by_identifier("Jane@Example.com")
    result = await store.create(
        email="a@x.com", username="jane", display_name="Jane", password_hash=h
    )
"""

from datetime import timedelta
from uuid import UUID

from authority.core.enums import ErrorCode
from authority.core.errors import ValidationError
from authority.core.result import Failure, Result, Success
from authority.domain.entities import User
from authority.domain.errors import DuplicateUserError
from authority.domain.protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    SecretTokenGeneratorProtocol,
    UserRepository,
)

DUPLICATE_USER_MESSAGE = "Email or username already registered"


def duplicate_user_error(field: str | None = None) -> ValidationError:
    """Build the single error used for every duplicate registration."""
    return ValidationError(
        code=ErrorCode.USER_ALREADY_EXISTS,
        message=DUPLICATE_USER_MESSAGE,
        field=field,
    )


class CredentialStore:
    """Lookup, creation and targeted updates of users.

    Writes after creation touch only the columns they own, so a login never
    writes back a password hash it read before a concurrent reset.
    """

    def __init__(
        self,
        *,
        user_repo: UserRepository,
        clock: ClockProtocol,
        id_generator: IdGeneratorProtocol,
        token_generator: SecretTokenGeneratorProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._clock = clock
        self._ids = id_generator
        self._tokens = token_generator

    async def find_by_identifier(self, identifier: str) -> User | None:
        """Find a user by email or username.

        Identifiers containing '@' are emails (usernames cannot contain it),
        anything else is a username. Both matches are case-insensitive.
        """
        identifier = identifier.strip()
        if not identifier:
            return None
        if "@" in identifier:
            return await self._user_repo.find_by_email(identifier.lower())
        return await self._user_repo.find_by_username(identifier)

    async def find_by_id(self, user_id: UUID) -> User | None:
        return await self._user_repo.find_by_id(user_id)

    async def find_by_email(self, email: str) -> User | None:
        return await self._user_repo.find_by_email(email.strip().lower())

    async def email_taken(self, email: str) -> bool:
        return await self._user_repo.exists_by_email(email.strip().lower())

    async def username_taken(self, username: str) -> bool:
        return await self._user_repo.exists_by_username(username.strip())

    async def create(
        self,
        *,
        email: str,
        username: str,
        display_name: str,
        password_hash: str,
    ) -> Result[User, ValidationError]:
        """Create a user.

        Uniqueness is enforced by the repository at insert time; callers
        pre-check with email_taken/username_taken before paying for hashing.

        Returns:
            Success(User), or Failure(ValidationError) when the email or the
            username is already registered.
        """
        now = self._clock.now()
        user = User(
            id=self._ids.new_id(),
            email=email.strip().lower(),
            username=username.strip(),
            display_name=display_name,
            password_hash=password_hash,
            email_confirmation_token=self._tokens.new_token(),
            created_at=now,
            updated_at=now,
        )
        try:
            await self._user_repo.save(user)
        except DuplicateUserError:
            return Failure(error=duplicate_user_error())
        return Success(value=user)

    async def record_login_failure(
        self, user_id: UUID, *, threshold: int, window: timedelta
    ) -> bool:
        """Count a failed login. Returns True if this failure locked the account."""
        return await self._user_repo.record_login_failure(
            user_id, now=self._clock.now(), threshold=threshold, window=window
        )

    async def record_login_success(self, user_id: UUID) -> None:
        await self._user_repo.record_login_success(user_id, now=self._clock.now())

    async def change_password(self, user_id: UUID, password_hash: str) -> None:
        """Store a new password hash without touching any other column."""
        await self._user_repo.update_password(
            user_id, password_hash=password_hash, now=self._clock.now()
        )

    async def issue_email_confirmation(self, user_id: UUID) -> str | None:
        """Replace the user's outstanding confirmation token.

        Returns:
            The new token, or None if the email is already confirmed.
        """
        token = self._tokens.new_token()
        stored = await self._user_repo.set_email_confirmation_token(
            user_id, token=token, now=self._clock.now()
        )
        return token if stored else None

    async def confirm_email(self, user_id: UUID, token: str) -> bool:
        return await self._user_repo.confirm_email(
            user_id, token=token, now=self._clock.now()
        )
