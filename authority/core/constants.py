"""Centralized constants for internal implementation details.

These are NOT environment-specific configuration; see
`authority/core/config.py` for that.

Example:
    >>> from authority.core.constants import TOKEN_BYTES
    >>> token = secrets.token_urlsafe(TOKEN_BYTES)
"""

# =============================================================================
# Token lengths
# =============================================================================

TOKEN_BYTES: int = 32
"""Number of random bytes in refresh, reset and session tokens (256 bits)."""

TOKEN_TYPE_BEARER: str = "bearer"
"""Token type reported to clients alongside the access token."""

ACCESS_TOKEN_TYPE_CLAIM: str = "access"
"""Value of the token_type claim carried by access tokens."""


# =============================================================================
# Revocation reasons
# =============================================================================

REASON_REPLACED: str = "replaced by new token"
REASON_REUSE_DETECTED: str = "token reuse detected"
REASON_LOGOUT: str = "logout"
REASON_LOGOUT_ALL: str = "logout all sessions"
REASON_SESSION_REVOKED: str = "session revoked"
REASON_SESSION_ENDED: str = "session ended"
REASON_PASSWORD_CHANGED: str = "password changed"
REASON_PASSWORD_RESET: str = "password reset"
