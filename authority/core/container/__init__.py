"""Container module - centralized dependency wiring.

- infrastructure: application-scoped adapters (logging, database, hashing,
  clock and generators)
- orchestrator: AuthOrchestrator factories over in-memory or SQLAlchemy
  repositories
"""

from authority.core.container.infrastructure import (
    get_clock,
    get_database,
    get_id_generator,
    get_logger,
    get_password_service,
    get_token_generator,
)
from authority.core.container.orchestrator import (
    create_auth_orchestrator,
    create_in_memory_orchestrator,
    create_sqlalchemy_orchestrator,
)

__all__ = [
    "create_auth_orchestrator",
    "create_in_memory_orchestrator",
    "create_sqlalchemy_orchestrator",
    "get_clock",
    "get_database",
    "get_id_generator",
    "get_logger",
    "get_password_service",
    "get_token_generator",
]
