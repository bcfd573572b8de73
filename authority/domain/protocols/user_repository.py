"""UserRepository protocol for user persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.

There is no whole-row update: every mutation names the columns it writes, so
a login holding a stale copy of the user can never write an old password
hash back over a concurrent password change.
"""

from datetime import datetime, timedelta
from typing import Protocol
from uuid import UUID

from authority.domain.entities.user import User


class UserRepository(Protocol):
    """User repository protocol (port).

    Email and username lookups are case-insensitive. Both are unique; the
    uniqueness is enforced by the store itself, not only by the callers'
    pre-checks.

    Methods:
        find_by_id: Retrieve user by ID
        find_by_email: Retrieve user by email
        find_by_username: Retrieve user by username
        exists_by_email / exists_by_username: Registration pre-checks
        save: Create new user
        record_login_failure / record_login_success: Lockout bookkeeping
        update_password: Replace the password hash
        set_email_confirmation_token / confirm_email: Email confirmation
    """

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive)."""
        ...

    async def find_by_username(self, username: str) -> User | None:
        """Find user by username (case-insensitive)."""
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether the email is registered (case-insensitive)."""
        ...

    async def exists_by_username(self, username: str) -> bool:
        """Check whether the username is taken (case-insensitive)."""
        ...

    async def save(self, user: User) -> None:
        """Create new user.

        Raises:
            DuplicateUserError: If the email or username already exists.
        """
        ...

    async def record_login_failure(
        self, user_id: UUID, *, now: datetime, threshold: int, window: timedelta
    ) -> bool:
        """Atomically count a failed login, locking at the threshold.

        Returns:
            bool: True if this failure locked the account.
        """
        ...

    async def record_login_success(self, user_id: UUID, *, now: datetime) -> None:
        """Clear the failure counter and lock, stamp last_login_at."""
        ...

    async def update_password(
        self, user_id: UUID, *, password_hash: str, now: datetime
    ) -> None:
        """Replace the password hash (and nothing else)."""
        ...

    async def set_email_confirmation_token(
        self, user_id: UUID, *, token: str, now: datetime
    ) -> bool:
        """Store a confirmation token unless the email is already confirmed.

        Returns:
            bool: True if the token was stored.
        """
        ...

    async def confirm_email(self, user_id: UUID, *, token: str, now: datetime) -> bool:
        """Confirm the email if token matches the outstanding one.

        Returns:
            bool: True if this call confirmed the address.
        """
        ...
