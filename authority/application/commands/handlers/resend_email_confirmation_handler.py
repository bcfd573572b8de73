"""Resend Email Confirmation handler.

Flow:
1. Look up user by email
2. If found and unconfirmed: replace the confirmation token (the previous
   link stops working) and send the new link in the background
3. Always return Success(None)

Like forgot-password, the response never reveals whether the address is
registered or already confirmed.
"""

from authority.application.commands.auth_commands import ResendEmailConfirmation
from authority.application.commands.handlers.register_user_handler import (
    confirmation_link,
)
from authority.application.services import CredentialStore, EmailDispatcher
from authority.core.result import Result, Success
from authority.domain.protocols import LoggerProtocol


class ResendEmailConfirmationHandler:
    """Handler for resend email confirmation command."""

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        email_dispatcher: EmailDispatcher,
        logger: LoggerProtocol,
        confirmation_url: str,
    ) -> None:
        self._credential_store = credential_store
        self._email_dispatcher = email_dispatcher
        self._logger = logger
        self._confirmation_url = confirmation_url

    async def handle(self, cmd: ResendEmailConfirmation) -> Result[None, None]:
        # Step 1: Look up user
        user = await self._credential_store.find_by_email(cmd.email)
        if user is None or user.email_confirmed:
            self._logger.info("email_confirmation_resend_skipped")
            return Success(value=None)

        # Step 2: New token and link
        token = await self._credential_store.issue_email_confirmation(user.id)
        if token is not None:
            self._email_dispatcher.send_email_confirmation(
                user.email,
                confirmation_link(self._confirmation_url, user.id, token),
                user_id=user.id,
            )

        # Step 3: Uniform response
        self._logger.info("email_confirmation_resent", user_id=str(user.id))
        return Success(value=None)
