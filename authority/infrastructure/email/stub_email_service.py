"""Stub email service (development/testing).

Writes emails to the structured log instead of sending them. Reset and
confirmation URLs carry live tokens, so they are logged at DEBUG only; the
INFO entry names the recipient and the kind of email.

The most recent messages are also kept in memory (outbox) so tests can pick
up a link the way a user would from their inbox. The outbox is bounded; the
oldest messages drop off once it is full.
"""

from collections import deque
from dataclasses import dataclass

from authority.domain.protocols import LoggerProtocol

OUTBOX_SIZE = 100


@dataclass(frozen=True, kw_only=True)
class SentEmail:
    """One email handed to the stub."""

    kind: str
    to_email: str
    url: str | None = None


class StubEmailService:
    """EmailServiceProtocol implementation that logs instead of sending."""

    def __init__(self, logger: LoggerProtocol, outbox_size: int = OUTBOX_SIZE) -> None:
        self._logger = logger
        self.outbox: deque[SentEmail] = deque(maxlen=outbox_size)

    async def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        self.outbox.append(
            SentEmail(kind="password_reset", to_email=to_email, url=reset_url)
        )
        self._logger.info("email_sent", kind="password_reset", to_email=to_email)
        self._logger.debug("password_reset_link", to_email=to_email, reset_url=reset_url)

    async def send_password_changed_notification(self, to_email: str) -> None:
        self.outbox.append(SentEmail(kind="password_changed", to_email=to_email))
        self._logger.info("email_sent", kind="password_changed", to_email=to_email)

    async def send_email_confirmation(
        self, to_email: str, confirmation_url: str
    ) -> None:
        self.outbox.append(
            SentEmail(kind="email_confirmation", to_email=to_email, url=confirmation_url)
        )
        self._logger.info("email_sent", kind="email_confirmation", to_email=to_email)
        self._logger.debug(
            "email_confirmation_link", to_email=to_email, confirmation_url=confirmation_url
        )
