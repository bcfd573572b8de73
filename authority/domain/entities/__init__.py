"""Domain entities."""

from authority.domain.entities.password_reset_token import PasswordResetToken
from authority.domain.entities.refresh_token import RefreshToken, RefreshTokenState
from authority.domain.entities.user import User
from authority.domain.entities.user_session import UserSession

__all__ = [
    "PasswordResetToken",
    "RefreshToken",
    "RefreshTokenState",
    "User",
    "UserSession",
]
