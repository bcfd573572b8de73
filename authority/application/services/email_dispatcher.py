"""Email dispatcher.

Hands emails to the EmailServiceProtocol in the background, so no handler
awaits delivery. Forgot-password therefore takes the same time whether the
address is registered or not, and a slow or failing mail server never fails
the operation that triggered the email.

Delivery is fail-open: exceptions are logged at warning level and never
propagated.

Usage:
    dispatcher = EmailDispatcher(email_service=email, logger=logger)
    dispatcher.send_password_reset(user.email, reset_url, user_id=user.id)

    # Tests and shutdown wait for everything in flight
    await dispatcher.drain()
"""

import asyncio
from collections.abc import Awaitable
from uuid import UUID

from authority.domain.protocols import EmailServiceProtocol, LoggerProtocol


class EmailDispatcher:
    """Schedule email delivery without awaiting it."""

    def __init__(
        self, *, email_service: EmailServiceProtocol, logger: LoggerProtocol
    ) -> None:
        self._email_service = email_service
        self._logger = logger
        # Strong references keep scheduled deliveries from being collected.
        self._pending: set[asyncio.Task[None]] = set()

    def send_password_reset(
        self, to_email: str, reset_url: str, *, user_id: UUID
    ) -> None:
        self._dispatch(
            "password_reset",
            user_id,
            self._email_service.send_password_reset_email(
                to_email=to_email, reset_url=reset_url
            ),
        )

    def send_password_changed(self, to_email: str, *, user_id: UUID) -> None:
        self._dispatch(
            "password_changed",
            user_id,
            self._email_service.send_password_changed_notification(to_email=to_email),
        )

    def send_email_confirmation(
        self, to_email: str, confirmation_url: str, *, user_id: UUID
    ) -> None:
        self._dispatch(
            "email_confirmation",
            user_id,
            self._email_service.send_email_confirmation(
                to_email=to_email, confirmation_url=confirmation_url
            ),
        )

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every delivery scheduled so far."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _dispatch(self, kind: str, user_id: UUID, send: Awaitable[None]) -> None:
        task = asyncio.create_task(self._deliver(kind, user_id, send))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, kind: str, user_id: UUID, send: Awaitable[None]) -> None:
        try:
            await send
        except Exception as e:
            self._logger.warning(
                "email_delivery_failed",
                kind=kind,
                user_id=str(user_id),
                error_type=type(e).__name__,
                error_message=str(e),
            )
