"""Forgot Password handler.

Flow:
1. Look up user by email
2. If found: issue a reset token and email the reset link
3. Always return Success(None)

The response never depends on whether the account exists. The email is
handed to the dispatcher and delivered in the background, so delivery time
and delivery failures never reach the caller.
"""

from urllib.parse import urlencode

from authority.application.commands.auth_commands import ForgotPassword
from authority.application.services import (
    CredentialStore,
    EmailDispatcher,
    PasswordResetLedger,
)
from authority.core.result import Result, Success
from authority.domain.protocols import LoggerProtocol


class ForgotPasswordHandler:
    """Handler for forgot password command."""

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        password_reset_ledger: PasswordResetLedger,
        email_dispatcher: EmailDispatcher,
        logger: LoggerProtocol,
        reset_url: str,
    ) -> None:
        self._credential_store = credential_store
        self._password_reset_ledger = password_reset_ledger
        self._email_dispatcher = email_dispatcher
        self._logger = logger
        self._reset_url = reset_url

    async def handle(self, cmd: ForgotPassword) -> Result[None, None]:
        # Step 1: Look up user
        user = await self._credential_store.find_by_email(cmd.email)
        if user is None:
            self._logger.info("password_reset_requested_unknown_email")
            return Success(value=None)

        # Step 2: Issue token and deliver link
        reset_token = await self._password_reset_ledger.request_reset(
            user.id, client_ip=cmd.client_ip
        )
        reset_url = f"{self._reset_url}?{urlencode({'token': reset_token.token})}"
        self._email_dispatcher.send_password_reset(
            user.email, reset_url, user_id=user.id
        )

        # Step 3: Uniform response
        self._logger.info("password_reset_requested", user_id=str(user.id))
        return Success(value=None)
