"""Opaque token value generator (adapter).

Refresh tokens, reset tokens and public session ids are all 32 random bytes
rendered as URL-safe base64, so they travel safely in query strings.
"""

import secrets

from authority.core.constants import TOKEN_BYTES


class SecureTokenGenerator:
    """Cryptographically random URL-safe tokens."""

    def __init__(self, nbytes: int = TOKEN_BYTES) -> None:
        self._nbytes = nbytes

    def new_token(self) -> str:
        return secrets.token_urlsafe(self._nbytes)
