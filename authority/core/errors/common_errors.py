"""Common error classes shared by every layer.

Error Types:
- ValidationError: Input validation failures and duplicate registrations
- NotFoundError: Resource not found (or not owned by the caller)

Usage:
    from authority.core.errors import ValidationError
    from authority.core.enums import ErrorCode
    from authority.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_EMAIL,
        message="Invalid email format",
        field="email",
    ))
"""

from dataclasses import dataclass

from authority.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Field name that failed validation.
        details: Additional context.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        resource_type: Type of resource (User, Session).
        resource_id: ID of the resource that was not found.
        details: Additional context.
    """

    resource_type: str
    resource_id: str
