"""Core errors package.

Usage:
    from authority.core.errors import DomainError, ValidationError, NotFoundError
"""

from authority.core.errors.common_errors import NotFoundError, ValidationError
from authority.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
]
