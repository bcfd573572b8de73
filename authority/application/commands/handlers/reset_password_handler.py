"""Reset Password handler.

Flow:
1. Check strength of the new password (ValidationError, token untouched)
2. Consume the reset token (InvalidTokenError: not found, expired, used);
   consuming invalidates all the user's other reset tokens
3. Load the user (InvalidTokenError if the account is gone)
4. Re-hash and store
5. Revoke every refresh token of the user
6. Notify the user by email in the background
"""

from authority.application.commands.auth_commands import ResetPassword
from authority.application.services import (
    CredentialStore,
    EmailDispatcher,
    PasswordResetLedger,
    RefreshTokenLedger,
)
from authority.application.services.input_validation import check_new_password
from authority.core.constants import REASON_PASSWORD_RESET
from authority.core.errors import ValidationError
from authority.core.result import Failure, Result, Success
from authority.domain.errors import InvalidTokenError, TokenFailureReason
from authority.domain.protocols import LoggerProtocol, PasswordHashingProtocol


class ResetPasswordHandler:
    """Handler for reset password command."""

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        password_reset_ledger: PasswordResetLedger,
        refresh_token_ledger: RefreshTokenLedger,
        password_service: PasswordHashingProtocol,
        email_dispatcher: EmailDispatcher,
        logger: LoggerProtocol,
    ) -> None:
        self._credential_store = credential_store
        self._password_reset_ledger = password_reset_ledger
        self._refresh_token_ledger = refresh_token_ledger
        self._password_service = password_service
        self._email_dispatcher = email_dispatcher
        self._logger = logger

    async def handle(
        self, cmd: ResetPassword
    ) -> Result[int, ValidationError | InvalidTokenError]:
        """Handle reset password command.

        Returns:
            Success(number of refresh tokens revoked) or Failure.
        """
        # Step 1: New password strength
        violation = check_new_password(cmd.new_password)
        if violation is not None:
            return Failure(error=violation)

        # Step 2: Consume token
        consumed = await self._password_reset_ledger.consume(cmd.token)
        if isinstance(consumed, Failure):
            self._logger.info("password_reset_rejected", reason=consumed.error.reason.value)
            return consumed

        # Step 3: Load user
        user = await self._credential_store.find_by_id(consumed.value.user_id)
        if user is None:
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))

        # Step 4: Re-hash
        await self._credential_store.change_password(
            user.id, self._password_service.hash_password(cmd.new_password)
        )

        # Step 5: Kill every refresh token
        revoked = await self._refresh_token_ledger.revoke_all_for_user(
            user.id, client_ip=cmd.client_ip, reason=REASON_PASSWORD_RESET
        )

        # Step 6: Notify
        self._email_dispatcher.send_password_changed(user.email, user_id=user.id)

        self._logger.info("password_reset_completed", user_id=str(user.id))
        return Success(value=revoked)
