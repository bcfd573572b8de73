"""Authentication domain errors.

Failure values for the authentication flows. Like every DomainError they are
returned inside Failure, never raised.

Error Types:
    - InvalidCredentialsError: unknown identifier OR wrong password (one
      variant for both so callers cannot tell them apart)
    - LockedOutError: too many recent failed logins
    - InvalidTokenError: refresh/reset/access token not found, expired or used
    - SecurityViolationError: a rotated-away refresh token was presented again

Usage:
    match await orchestrator.refresh(cmd):
        case Failure(error=SecurityViolationError()):
            ...  # force full re-login
        case Failure(error=InvalidTokenError()):
            ...
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from authority.core.enums import ErrorCode
from authority.core.errors import DomainError


class TokenFailureReason(str, Enum):
    """Why a token was rejected."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ALREADY_USED = "already_used"
    REVOKED = "revoked"
    MALFORMED = "malformed"
    SESSION_ENDED = "session_ended"


_REASON_CODES: dict[TokenFailureReason, ErrorCode] = {
    TokenFailureReason.EXPIRED: ErrorCode.TOKEN_EXPIRED,
    TokenFailureReason.ALREADY_USED: ErrorCode.TOKEN_ALREADY_USED,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidCredentialsError(DomainError):
    """Wrong identifier or password."""

    code: ErrorCode = ErrorCode.INVALID_CREDENTIALS
    message: str = "Invalid credentials"


@dataclass(frozen=True, slots=True, kw_only=True)
class LockedOutError(DomainError):
    """Account temporarily locked after repeated failed logins.

    Attributes:
        locked_until: When the lock lifts.
    """

    locked_until: datetime
    code: ErrorCode = ErrorCode.ACCOUNT_LOCKED
    message: str = "Account is temporarily locked. Please try again later."


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidTokenError(DomainError):
    """Token rejected (not found, expired, used, revoked or malformed).

    Attributes:
        reason: Machine-readable rejection reason.
    """

    reason: TokenFailureReason = TokenFailureReason.NOT_FOUND
    code: ErrorCode = ErrorCode.TOKEN_INVALID
    message: str = "Invalid or expired token"

    @classmethod
    def because(cls, reason: TokenFailureReason) -> "InvalidTokenError":
        """Build an error whose code matches the reason."""
        return cls(reason=reason, code=_REASON_CODES.get(reason, ErrorCode.TOKEN_INVALID))


@dataclass(frozen=True, slots=True, kw_only=True)
class SecurityViolationError(DomainError):
    """Reuse of a rotated-away refresh token (possible theft).

    Attributes:
        user_id: Owner of the reused token; all their credentials are revoked.
        revoked_tokens: How many tokens the theft response revoked.
    """

    user_id: UUID
    revoked_tokens: int = 0
    code: ErrorCode = ErrorCode.TOKEN_REUSE_DETECTED
    message: str = "Token reuse detected. Please sign in again."
