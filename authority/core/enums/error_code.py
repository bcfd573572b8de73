"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Resource errors (*_NOT_FOUND)
- Authentication errors (INVALID_CREDENTIALS, TOKEN_*)
- Security errors (ACCOUNT_LOCKED, TOKEN_REUSE_DETECTED)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    INVALID_USERNAME = "invalid_username"
    INVALID_DISPLAY_NAME = "invalid_display_name"
    PASSWORD_TOO_WEAK = "password_too_weak"
    VALIDATION_FAILED = "validation_failed"
    USER_ALREADY_EXISTS = "user_already_exists"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    SESSION_NOT_FOUND = "session_not_found"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_ALREADY_USED = "token_already_used"

    # Security errors
    ACCOUNT_LOCKED = "account_locked"
    TOKEN_REUSE_DETECTED = "token_reuse_detected"
