"""SQLAlchemy repository adapters."""

from authority.infrastructure.persistence.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from authority.infrastructure.persistence.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)
from authority.infrastructure.persistence.repositories.session_repository import (
    SessionRepository,
)
from authority.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "SessionRepository",
    "UserRepository",
]
