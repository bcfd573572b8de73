"""In-memory repositories.

Process-local implementations of the repository protocols for tests, local
development and single-process deployments. Each repository serializes its
check-and-set sections with one asyncio.Lock and hands out copies, so callers
never mutate stored state behind the repository's back.
"""

from authority.infrastructure.memory.password_reset_token_repository import (
    InMemoryPasswordResetTokenRepository,
)
from authority.infrastructure.memory.refresh_token_repository import (
    InMemoryRefreshTokenRepository,
)
from authority.infrastructure.memory.session_repository import (
    InMemorySessionRepository,
)
from authority.infrastructure.memory.user_repository import InMemoryUserRepository

__all__ = [
    "InMemoryPasswordResetTokenRepository",
    "InMemoryRefreshTokenRepository",
    "InMemorySessionRepository",
    "InMemoryUserRepository",
]
