"""SQLAlchemy models.

Importing this package registers every table on BaseModel.metadata.
"""

from authority.infrastructure.persistence.base import BaseModel
from authority.infrastructure.persistence.models.password_reset_token import (
    PasswordResetTokenModel,
)
from authority.infrastructure.persistence.models.refresh_token import (
    RefreshTokenModel,
)
from authority.infrastructure.persistence.models.user import UserModel
from authority.infrastructure.persistence.models.user_session import UserSessionModel

__all__ = [
    "BaseModel",
    "PasswordResetTokenModel",
    "RefreshTokenModel",
    "UserModel",
    "UserSessionModel",
]
