"""Authentication DTOs (Data Transfer Objects).

Plain response dataclasses returned by the handlers. No framework types, so
any request layer can serialize them.

DTOs:
    - UserProfile: public view of a user
    - RegisteredUser: result of register
    - AuthTokens: result of login and refresh
    - SessionView: one entry of list_sessions
    - TokenValidation: result of validate_access_token
    - SweepReport: result of the maintenance sweep
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from authority.core.constants import TOKEN_TYPE_BEARER
from authority.domain.entities import User, UserSession


@dataclass(frozen=True, kw_only=True)
class UserProfile:
    """Public view of a user.

    Attributes:
        user_id: User's unique identifier.
        email: Normalized email address.
        username: Username.
        display_name: Display name.
        email_confirmed: Email confirmation status.
        last_login_at: Previous successful login, if any.
    """

    user_id: UUID
    email: str
    username: str
    display_name: str
    email_confirmed: bool
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            user_id=user.id,
            email=user.email,
            username=user.username,
            display_name=user.display_name,
            email_confirmed=user.email_confirmed,
            last_login_at=user.last_login_at,
        )


@dataclass(frozen=True, kw_only=True)
class RegisteredUser:
    """Response from successful registration."""

    user: UserProfile


@dataclass(frozen=True, kw_only=True)
class AuthTokens:
    """Response from successful login or refresh.

    Attributes:
        access_token: Signed access token (short-lived).
        refresh_token: Opaque refresh token (rotates on every use).
        token_type: Token type (always "bearer").
        expires_in: Access token lifetime in seconds.
        session_id: Session the tokens belong to.
        user: Profile of the authenticated user.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    user: UserProfile
    session_id: str | None = None
    token_type: str = TOKEN_TYPE_BEARER


@dataclass(frozen=True, kw_only=True)
class SessionView:
    """One active session as shown to its owner."""

    session_id: str
    ip_address: str | None
    user_agent: str | None
    device_info: str | None
    created_at: datetime
    last_activity_at: datetime
    expires_at: datetime
    is_current: bool = False

    @classmethod
    def from_session(cls, session: UserSession, *, is_current: bool) -> "SessionView":
        return cls(
            session_id=session.session_id,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_info=session.device_info,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            expires_at=session.expires_at,
            is_current=is_current,
        )


@dataclass(frozen=True, kw_only=True)
class TokenValidation:
    """Identity resolved from a valid access token."""

    user_id: UUID
    username: str
    email: str
    jwt_id: str
    expires_at: datetime
    session_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class SweepReport:
    """Rows deleted by one maintenance sweep."""

    refresh_tokens: int
    reset_tokens: int
    sessions: int
