"""Write-side commands."""

from authority.application.commands.auth_commands import (
    ChangePassword,
    ConfirmEmail,
    ForgotPassword,
    LoginUser,
    LogoutAllSessions,
    LogoutUser,
    RefreshTokens,
    RegisterUser,
    ResendEmailConfirmation,
    ResetPassword,
)
from authority.application.commands.session_commands import RevokeSession

__all__ = [
    "ChangePassword",
    "ConfirmEmail",
    "ForgotPassword",
    "LoginUser",
    "LogoutAllSessions",
    "LogoutUser",
    "RefreshTokens",
    "RegisterUser",
    "ResendEmailConfirmation",
    "ResetPassword",
    "RevokeSession",
]
