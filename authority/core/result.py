"""Result types for railway-oriented programming.

Operations that can fail for expected reasons (bad credentials, expired
tokens) return a Result instead of raising, which keeps every failure path
visible at the call site.

Usage:
    result = await orchestrator.refresh(RefreshTokens(refresh_token=value))
    match result:
        case Success(value=tokens):
            ...
        case Failure(error=SecurityViolationError()):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result = Union[Success[T], Failure[E]]
