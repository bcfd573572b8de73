"""Confirm Email handler.

Flow:
1. Load user (InvalidTokenError(NOT_FOUND) if gone)
2. Already confirmed: InvalidTokenError(ALREADY_USED)
3. Confirm with the presented token; a token that does not match the
   outstanding one is InvalidTokenError(NOT_FOUND)
4. Return Success(None)

Confirming clears the stored token, so a confirmation link works once.
"""

from authority.application.commands.auth_commands import ConfirmEmail
from authority.application.services import CredentialStore
from authority.core.result import Failure, Result, Success
from authority.domain.errors import InvalidTokenError, TokenFailureReason
from authority.domain.protocols import LoggerProtocol


class ConfirmEmailHandler:
    """Handler for confirm email command."""

    def __init__(
        self, *, credential_store: CredentialStore, logger: LoggerProtocol
    ) -> None:
        self._credential_store = credential_store
        self._logger = logger

    async def handle(self, cmd: ConfirmEmail) -> Result[None, InvalidTokenError]:
        # Step 1: Load user
        user = await self._credential_store.find_by_id(cmd.user_id)
        if user is None:
            self._logger.info("email_confirmation_rejected", reason="unknown_user")
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))

        # Step 2: Already confirmed
        if user.email_confirmed:
            self._logger.info(
                "email_confirmation_rejected",
                reason="already_confirmed",
                user_id=str(user.id),
            )
            return Failure(
                error=InvalidTokenError.because(TokenFailureReason.ALREADY_USED)
            )

        # Step 3: Match token
        if not await self._credential_store.confirm_email(user.id, cmd.token):
            self._logger.info(
                "email_confirmation_rejected",
                reason="token_mismatch",
                user_id=str(user.id),
            )
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))

        # Step 4: Return Success
        self._logger.info("email_confirmed", user_id=str(user.id))
        return Success(value=None)
