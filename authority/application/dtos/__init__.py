"""Response DTOs."""

from authority.application.dtos.auth_dtos import (
    AuthTokens,
    RegisteredUser,
    SessionView,
    SweepReport,
    TokenValidation,
    UserProfile,
)

__all__ = [
    "AuthTokens",
    "RegisteredUser",
    "SessionView",
    "SweepReport",
    "TokenValidation",
    "UserProfile",
]
