"""User domain entity for authentication.

Pure business logic, no framework dependencies.

Lockout:
    - failed_login_attempts counts consecutive failures
    - locked_until is set once the threshold is reached
    - a successful login clears both

Email confirmation:
    - registration stores a confirmation token and leaves email_confirmed off
    - presenting the stored token confirms the address and clears the token
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID


@dataclass
class User:
    """User domain entity with authentication business rules.

    Time is always passed in by the caller (from the injected clock), so the
    lockout rules are deterministic under test.

    Attributes:
        id: Unique user identifier.
        email: Email address, stored lowercase (unique).
        username: Username as entered (unique, compared case-insensitively).
        display_name: Name shown to other users.
        password_hash: Bcrypt hashed password (never plaintext).
        email_confirmed: Whether the email address has been confirmed.
        email_confirmation_token: Outstanding confirmation token, if any.
        two_factor_secret: Optional second-factor secret (stored only).
        failed_login_attempts: Consecutive failed login attempts.
        locked_until: Account is locked while now < locked_until.
        last_login_at: Timestamp of the last successful login.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.

    Example:
        >>> user.record_failed_login(now, threshold=5, window=timedelta(minutes=30))
        >>> user.failed_login_attempts
        1
        >>> user.is_locked(now)
        False
    """

    id: UUID
    email: str
    username: str
    display_name: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    email_confirmed: bool = False
    email_confirmation_token: str | None = None
    two_factor_secret: str | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    last_login_at: datetime | None = None

    def is_locked(self, now: datetime) -> bool:
        """Check if the account is inside its lockout window.

        Args:
            now: Current time.

        Returns:
            bool: True while now is before locked_until.
        """
        if self.locked_until is None:
            return False
        return now < self.locked_until

    def record_failed_login(
        self, now: datetime, *, threshold: int, window: timedelta
    ) -> bool:
        """Count a failed login and lock the account at the threshold.

        Args:
            now: Current time.
            threshold: Consecutive failures that trigger the lock.
            window: Lock duration.

        Returns:
            bool: True if this failure locked the account.
        """
        self.failed_login_attempts += 1
        self.updated_at = now
        if self.failed_login_attempts >= threshold:
            self.locked_until = now + window
            self.failed_login_attempts = 0
            return True
        return False

    def record_successful_login(self, now: datetime) -> None:
        """Clear lockout state and stamp the login time."""
        self.failed_login_attempts = 0
        self.locked_until = None
        self.last_login_at = now
        self.updated_at = now

    def change_password(self, password_hash: str, now: datetime) -> None:
        """Replace the password hash."""
        self.password_hash = password_hash
        self.updated_at = now

    def issue_email_confirmation(self, token: str, now: datetime) -> bool:
        """Store a new confirmation token.

        Returns:
            bool: False (nothing stored) if the email is already confirmed.
        """
        if self.email_confirmed:
            return False
        self.email_confirmation_token = token
        self.updated_at = now
        return True

    def confirm_email(self, token: str, now: datetime) -> bool:
        """Confirm the email address if token matches the outstanding one.

        Returns:
            bool: True if this call confirmed the address.
        """
        if self.email_confirmed or self.email_confirmation_token is None:
            return False
        if not secrets.compare_digest(self.email_confirmation_token, token):
            return False
        self.email_confirmed = True
        self.email_confirmation_token = None
        self.updated_at = now
        return True
