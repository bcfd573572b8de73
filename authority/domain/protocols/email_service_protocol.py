"""EmailServiceProtocol - Domain protocol for email operations.

Following hexagonal architecture:
- Domain defines what it needs (protocol/port)
- Infrastructure provides implementation (adapter)
- Application layer uses protocol, not concrete implementation
"""

from typing import Protocol


class EmailServiceProtocol(Protocol):
    """Protocol for email sending operations.

    Implementations:
        - StubEmailService: authority/infrastructure/email/stub_email_service.py
    """

    async def send_password_reset_email(
        self,
        to_email: str,
        reset_url: str,
    ) -> None:
        """Send password reset email.

        Args:
            to_email: Recipient email address.
            reset_url: Full URL with password reset token.
        """
        ...

    async def send_password_changed_notification(
        self,
        to_email: str,
    ) -> None:
        """Send notification that password was changed.

        Args:
            to_email: Recipient email address.
        """
        ...

    async def send_email_confirmation(
        self,
        to_email: str,
        confirmation_url: str,
    ) -> None:
        """Send the email address confirmation link.

        Args:
            to_email: Recipient email address.
            confirmation_url: Full URL with user id and confirmation token.
        """
        ...
