"""Domain errors package.

Usage:
    from authority.domain.errors import InvalidTokenError, TokenFailureReason
"""

from authority.domain.errors.auth_errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    LockedOutError,
    SecurityViolationError,
    TokenFailureReason,
)
from authority.domain.errors.duplicate_user_error import DuplicateUserError

__all__ = [
    "DuplicateUserError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "LockedOutError",
    "SecurityViolationError",
    "TokenFailureReason",
]
