"""Change Password handler.

Flow:
1. Load user (NotFoundError if gone)
2. Verify current password (InvalidCredentialsError on mismatch)
3. Check strength of the new password (ValidationError)
4. Re-hash and store
5. Revoke every refresh token of the user, so other devices must log in again
6. Notify the user by email in the background
"""

from authority.application.commands.auth_commands import ChangePassword
from authority.application.services import (
    CredentialStore,
    EmailDispatcher,
    RefreshTokenLedger,
)
from authority.application.services.input_validation import check_new_password
from authority.core.constants import REASON_PASSWORD_CHANGED
from authority.core.enums import ErrorCode
from authority.core.errors import NotFoundError, ValidationError
from authority.core.result import Failure, Result, Success
from authority.domain.errors import InvalidCredentialsError
from authority.domain.protocols import LoggerProtocol, PasswordHashingProtocol


class ChangePasswordHandler:
    """Handler for change password command."""

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        refresh_token_ledger: RefreshTokenLedger,
        password_service: PasswordHashingProtocol,
        email_dispatcher: EmailDispatcher,
        logger: LoggerProtocol,
    ) -> None:
        self._credential_store = credential_store
        self._refresh_token_ledger = refresh_token_ledger
        self._password_service = password_service
        self._email_dispatcher = email_dispatcher
        self._logger = logger

    async def handle(
        self, cmd: ChangePassword
    ) -> Result[int, NotFoundError | InvalidCredentialsError | ValidationError]:
        """Handle change password command.

        Returns:
            Success(number of refresh tokens revoked) or Failure.
        """
        # Step 1: Load user
        user = await self._credential_store.find_by_id(cmd.user_id)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                    resource_type="User",
                    resource_id=str(cmd.user_id),
                )
            )

        # Step 2: Verify current password
        if not self._password_service.verify_password(
            cmd.current_password, user.password_hash
        ):
            self._logger.info("password_change_rejected", user_id=str(user.id))
            return Failure(error=InvalidCredentialsError())

        # Step 3: New password strength
        violation = check_new_password(cmd.new_password)
        if violation is not None:
            return Failure(error=violation)

        # Step 4: Re-hash
        await self._credential_store.change_password(
            user.id, self._password_service.hash_password(cmd.new_password)
        )

        # Step 5: Kill every refresh token
        revoked = await self._refresh_token_ledger.revoke_all_for_user(
            user.id, client_ip=cmd.client_ip, reason=REASON_PASSWORD_CHANGED
        )

        # Step 6: Notify
        self._email_dispatcher.send_password_changed(user.email, user_id=user.id)

        self._logger.info("password_changed", user_id=str(user.id), revoked_tokens=revoked)
        return Success(value=revoked)

