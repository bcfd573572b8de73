"""Application services: the stores, ledgers and registry the handlers compose."""

from authority.application.services.access_token_issuer import AccessTokenIssuer
from authority.application.services.credential_store import CredentialStore
from authority.application.services.email_dispatcher import EmailDispatcher
from authority.application.services.password_reset_ledger import PasswordResetLedger
from authority.application.services.refresh_token_ledger import (
    RefreshTokenLedger,
    RotationResult,
    TokenUsageStats,
)
from authority.application.services.session_registry import SessionRegistry

__all__ = [
    "AccessTokenIssuer",
    "CredentialStore",
    "EmailDispatcher",
    "PasswordResetLedger",
    "RefreshTokenLedger",
    "RotationResult",
    "SessionRegistry",
    "TokenUsageStats",
]
