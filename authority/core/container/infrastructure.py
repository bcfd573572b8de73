"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services, built from
the process settings:
- Logging (console, human-readable or JSON)
- Database (async SQLAlchemy engine)
- Password hashing (bcrypt)
- Clock, id and token generators

Adapters are imported inside the factories so importing the container never
drags in an adapter that the caller does not use.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from authority.core.config import get_settings

if TYPE_CHECKING:
    from authority.domain.protocols import (
        ClockProtocol,
        IdGeneratorProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        SecretTokenGeneratorProtocol,
    )
    from authority.infrastructure.persistence.database import Database


@lru_cache
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development/production: ConsoleAdapter (human-readable unless log_json)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from authority.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(use_json=get_settings().use_json_logs)


@lru_cache
def get_database() -> "Database":
    """Return the application-scoped database singleton.

    Raises:
        RuntimeError: If no database_url is configured.
    """
    from authority.infrastructure.persistence.database import Database

    settings = get_settings()
    if settings.database_url is None:
        raise RuntimeError("AUTHORITY_DATABASE_URL is not configured")
    return Database(settings.database_url, echo=settings.db_echo)


@lru_cache
def get_password_service() -> "PasswordHashingProtocol":
    """Return the bcrypt password service configured with bcrypt_rounds."""
    from authority.infrastructure.security.bcrypt_password_service import (
        BcryptPasswordService,
    )

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache
def get_clock() -> "ClockProtocol":
    from authority.infrastructure.runtime.system_clock import SystemClock

    return SystemClock()


@lru_cache
def get_id_generator() -> "IdGeneratorProtocol":
    from authority.infrastructure.runtime.uuid7_generator import UUID7Generator

    return UUID7Generator()


@lru_cache
def get_token_generator() -> "SecretTokenGeneratorProtocol":
    from authority.infrastructure.security.secure_token_generator import (
        SecureTokenGenerator,
    )

    return SecureTokenGenerator()
