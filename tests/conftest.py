"""Shared fixtures.

Time is controlled through FakeClock, which every component receives through
the container instead of reading the wall clock. Tests move time with
clock.advance(...) rather than sleeping.
"""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from authority.application.commands import LoginUser, RegisterUser
from authority.core.config import Settings
from authority.core.container import create_in_memory_orchestrator
from authority.core.enums import Environment
from authority.infrastructure.email.stub_email_service import StubEmailService
from authority.infrastructure.logging.console_adapter import ConsoleAdapter
from authority.infrastructure.security.bcrypt_password_service import (
    BcryptPasswordService,
)

TEST_SECRET_KEY = "test-secret-key-that-is-at-least-32-bytes-long"
TEST_PASSWORD = "SecurePass123!"
START_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Controllable ClockProtocol implementation."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        self._now += timedelta(**delta)
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Settings for tests: cheap bcrypt, JSON logs, default lifetimes."""
    return Settings(
        environment=Environment.TESTING,
        secret_key=TEST_SECRET_KEY,
        bcrypt_rounds=4,
        password_reset_url="https://app.example.com/reset-password",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def logger():
    return ConsoleAdapter(use_json=True)


@pytest.fixture
def email_service(logger):
    return StubEmailService(logger)


@pytest.fixture
def password_service():
    return BcryptPasswordService(cost_factor=4)


@pytest_asyncio.fixture
async def orchestrator(settings, clock, logger, email_service, password_service):
    """AuthOrchestrator over fresh in-memory stores."""
    auth = create_in_memory_orchestrator(
        settings,
        clock=clock,
        logger=logger,
        email=email_service,
        hasher=password_service,
    )
    yield auth
    await auth.drain_email()


def register_command(
    email: str = "jane@example.com",
    username: str = "jane_doe",
    display_name: str = "Jane Doe",
    password: str = TEST_PASSWORD,
) -> RegisterUser:
    return RegisterUser(
        email=email, username=username, display_name=display_name, password=password
    )


def login_command(
    identifier: str = "jane@example.com",
    password: str = TEST_PASSWORD,
    **kwargs,
) -> LoginUser:
    return LoginUser(identifier=identifier, password=password, **kwargs)


@pytest_asyncio.fixture
async def registered_user(orchestrator):
    """Profile of a registered user (jane@example.com / jane_doe)."""
    result = await orchestrator.register(register_command())
    return result.value.user


@pytest_asyncio.fixture
async def logged_in(orchestrator, registered_user):
    """AuthTokens of a fresh login by the registered user."""
    result = await orchestrator.login(login_command(client_ip="10.0.0.1"))
    return result.value
