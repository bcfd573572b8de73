"""Authentication commands (write operations).

Commands represent caller intent to change state. They are immutable
(frozen=True), keyword-only data containers with no logic; handlers validate
them and return Result types.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Register a new user account.

    Attributes:
        email: Email address (validated and lowercased by the handler).
        username: Username, 3-50 characters.
        display_name: Name shown to other users, 1-100 characters.
        password: Plaintext password (strength-checked, then hashed).

    Example:
        >>> command = RegisterUser(
        ...     email="a@x.com",
        ...     username="jane",
        ...     display_name="Jane",
        ...     password="SecurePass123!",
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    username: str
    display_name: str
    password: str


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Authenticate and start a session.

    Attributes:
        identifier: Email address or username.
        password: Plaintext password.
        client_ip: Client IP address.
        user_agent: Client user-agent string.
        device_info: Free-form device descriptor.
        remember_me: Use the long session and refresh token lifetime.
    """

    identifier: str
    password: str
    client_ip: str | None = None
    user_agent: str | None = None
    device_info: str | None = None
    remember_me: bool = False


@dataclass(frozen=True, kw_only=True)
class RefreshTokens:
    """Exchange a refresh token for a new access/refresh pair."""

    refresh_token: str
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """Log out of one session.

    Attributes:
        user_id: Authenticated user.
        refresh_token: Token to revoke. None for access-token-only logout.
        client_ip: Client IP address.
    """

    user_id: UUID
    refresh_token: str | None = None
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class LogoutAllSessions:
    """Log out of every device."""

    user_id: UUID
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change password while authenticated.

    Attributes:
        user_id: Authenticated user.
        current_password: Must match the stored hash.
        new_password: Strength-checked new password.
        client_ip: Client IP address.
    """

    user_id: UUID
    current_password: str
    new_password: str
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class ForgotPassword:
    """Request a password reset link by email."""

    email: str
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResetPassword:
    """Set a new password using a reset token."""

    token: str
    new_password: str
    client_ip: str | None = None


@dataclass(frozen=True, kw_only=True)
class ConfirmEmail:
    """Confirm an email address with the token from the confirmation link.

    Attributes:
        user_id: User the link was issued to.
        token: Confirmation token from the link.
    """

    user_id: UUID
    token: str


@dataclass(frozen=True, kw_only=True)
class ResendEmailConfirmation:
    """Request a fresh confirmation link for an unconfirmed address."""

    email: str
