"""Unit tests for EmailDispatcher and the stub email service.

Tests cover:
- Delivery runs in the background (the caller never waits on the sender)
- Failed deliveries are logged at warning level, never raised
- drain() waits for everything in flight
- The stub outbox keeps only the most recent messages

Architecture:
- Senders gated on asyncio.Event to hold a delivery open
- Mock logger to observe the failure entry
"""

import asyncio
from unittest.mock import Mock

import pytest
from uuid_extensions import uuid7

from authority.application.commands import ForgotPassword
from authority.application.services import EmailDispatcher
from authority.core.container import create_in_memory_orchestrator
from authority.infrastructure.email.stub_email_service import StubEmailService
from tests.conftest import register_command


class GatedEmailService:
    """Sender that blocks until released, then records what it sent."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.sent: list[tuple[str, str]] = []

    async def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        await self.release.wait()
        self.sent.append(("password_reset", to_email))

    async def send_password_changed_notification(self, to_email: str) -> None:
        await self.release.wait()
        self.sent.append(("password_changed", to_email))

    async def send_email_confirmation(
        self, to_email: str, confirmation_url: str
    ) -> None:
        await self.release.wait()
        self.sent.append(("email_confirmation", to_email))


class FailingEmailService(GatedEmailService):
    async def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        raise ConnectionError("smtp down")


@pytest.mark.unit
class TestEmailDispatcher:
    async def test_send_returns_before_delivery(self):
        email = GatedEmailService()
        dispatcher = EmailDispatcher(email_service=email, logger=Mock())

        dispatcher.send_password_reset("jane@example.com", "url", user_id=uuid7())

        assert dispatcher.pending == 1
        assert email.sent == []

        email.release.set()
        await dispatcher.drain()

        assert email.sent == [("password_reset", "jane@example.com")]
        assert dispatcher.pending == 0

    async def test_failed_delivery_is_logged_not_raised(self):
        logger = Mock()
        dispatcher = EmailDispatcher(email_service=FailingEmailService(), logger=logger)
        user_id = uuid7()

        dispatcher.send_password_reset("jane@example.com", "url", user_id=user_id)
        await dispatcher.drain()

        logger.warning.assert_called_once_with(
            "email_delivery_failed",
            kind="password_reset",
            user_id=str(user_id),
            error_type="ConnectionError",
            error_message="smtp down",
        )

    async def test_forgot_password_does_not_wait_for_the_mail_server(
        self, settings, clock, logger, password_service
    ):
        # Arrange: a mail server that never answers until released
        email = GatedEmailService()
        email.release.set()
        auth = create_in_memory_orchestrator(
            settings, clock=clock, logger=logger, email=email, hasher=password_service
        )
        await auth.register(register_command())
        await auth.drain_email()
        email.release.clear()

        # Act
        known = await asyncio.wait_for(
            auth.forgot_password(ForgotPassword(email="jane@example.com")), timeout=5
        )
        unknown = await asyncio.wait_for(
            auth.forgot_password(ForgotPassword(email="ghost@example.com")), timeout=5
        )

        # Assert: both answered while the reset email is still undelivered
        assert known == unknown
        assert ("password_reset", "jane@example.com") not in email.sent

        email.release.set()
        await auth.drain_email()
        assert email.sent[-1] == ("password_reset", "jane@example.com")


@pytest.mark.unit
class TestStubEmailService:
    async def test_outbox_keeps_only_recent_messages(self):
        email = StubEmailService(Mock(), outbox_size=3)

        for n in range(5):
            await email.send_password_changed_notification(f"user{n}@example.com")

        assert [m.to_email for m in email.outbox] == [
            "user2@example.com",
            "user3@example.com",
            "user4@example.com",
        ]
