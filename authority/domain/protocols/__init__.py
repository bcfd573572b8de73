"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from authority.domain.protocols import PasswordHashingProtocol, UserRepository
"""

# Service protocols
from authority.domain.protocols.email_service_protocol import EmailServiceProtocol
from authority.domain.protocols.logger_protocol import LoggerProtocol
from authority.domain.protocols.password_hashing_protocol import (
    PasswordHashingProtocol,
)
from authority.domain.protocols.runtime_protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    SecretTokenGeneratorProtocol,
)
from authority.domain.protocols.token_generation_protocol import (
    AccessTokenClaims,
    TokenGenerationProtocol,
)

# Repository protocols
from authority.domain.protocols.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from authority.domain.protocols.refresh_token_repository import (
    RefreshTokenRepository,
)
from authority.domain.protocols.session_repository import SessionRepository
from authority.domain.protocols.user_repository import UserRepository

__all__ = [
    # Service protocols
    "AccessTokenClaims",
    "ClockProtocol",
    "EmailServiceProtocol",
    "IdGeneratorProtocol",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "SecretTokenGeneratorProtocol",
    "TokenGenerationProtocol",
    # Repository protocols
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "SessionRepository",
    "UserRepository",
]
