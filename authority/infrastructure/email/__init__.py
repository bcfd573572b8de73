"""Email service implementations.

- StubEmailService: log-only delivery for development and tests
"""

from authority.infrastructure.email.stub_email_service import (
    SentEmail,
    StubEmailService,
)

__all__ = ["SentEmail", "StubEmailService"]
