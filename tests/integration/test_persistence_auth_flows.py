"""Authentication flows over the SQLAlchemy-backed orchestrator.

Runs the headline flows against real SQL so the conditional writes and the
UTC column type are exercised end to end, including the session check on
refresh and chain-wide logout.
"""

import pytest
import pytest_asyncio

from authority.application.commands import LogoutUser, RefreshTokens
from authority.application.queries import ListSessions, ValidateAccessToken
from authority.core.container import create_sqlalchemy_orchestrator
from authority.core.result import Success
from authority.domain.errors import (
    InvalidTokenError,
    SecurityViolationError,
    TokenFailureReason,
)
from authority.infrastructure.persistence import Database
from tests.conftest import login_command, register_command


@pytest_asyncio.fixture
async def sql_orchestrator(tmp_path, settings, clock, logger, email_service, password_service):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'authority.db'}")
    await database.create_all()
    async with database.get_session() as session:
        auth = create_sqlalchemy_orchestrator(
            session,
            settings,
            clock=clock,
            logger=logger,
            email=email_service,
            hasher=password_service,
        )
        yield auth
        await auth.drain_email()
    await database.close()


@pytest.mark.integration
class TestSqlAuthFlows:
    async def test_register_login_refresh_logout(self, sql_orchestrator):
        auth = sql_orchestrator
        registered = await auth.register(register_command())
        tokens = (await auth.login(login_command("JANE_DOE"))).value

        refreshed = await auth.refresh(RefreshTokens(refresh_token=tokens.refresh_token))
        assert isinstance(refreshed, Success)

        validation = await auth.validate_access_token(
            ValidateAccessToken(access_token=refreshed.value.access_token)
        )
        assert validation.value.user_id == registered.value.user.user_id

        await auth.logout(
            LogoutUser(
                user_id=registered.value.user.user_id,
                refresh_token=refreshed.value.refresh_token,
            )
        )
        sessions = await auth.list_sessions(
            ListSessions(user_id=registered.value.user.user_id)
        )
        assert sessions.value == []

    async def test_reuse_detection(self, sql_orchestrator):
        auth = sql_orchestrator
        await auth.register(register_command())
        r1 = (await auth.login(login_command())).value.refresh_token
        r2 = (await auth.refresh(RefreshTokens(refresh_token=r1))).value.refresh_token

        replay = await auth.refresh(RefreshTokens(refresh_token=r1))
        after = await auth.refresh(RefreshTokens(refresh_token=r2))

        assert isinstance(replay.error, SecurityViolationError)
        assert isinstance(after.error, InvalidTokenError)
        assert after.error.reason == TokenFailureReason.REVOKED

    async def test_refresh_after_session_expiry_is_rejected(self, sql_orchestrator, clock):
        auth = sql_orchestrator
        await auth.register(register_command())
        r1 = (await auth.login(login_command())).value.refresh_token
        clock.advance(days=2)

        first = await auth.refresh(RefreshTokens(refresh_token=r1))
        again = await auth.refresh(RefreshTokens(refresh_token=r1))

        assert first.error.reason == TokenFailureReason.SESSION_ENDED
        assert isinstance(again.error, InvalidTokenError)
        assert again.error.reason == TokenFailureReason.REVOKED

    async def test_logout_with_stale_token_ends_the_chain(self, sql_orchestrator):
        auth = sql_orchestrator
        user_id = (await auth.register(register_command())).value.user.user_id
        r1 = (await auth.login(login_command())).value.refresh_token
        r2 = (await auth.refresh(RefreshTokens(refresh_token=r1))).value.refresh_token

        await auth.logout(LogoutUser(user_id=user_id, refresh_token=r1))

        after = await auth.refresh(RefreshTokens(refresh_token=r2))
        assert isinstance(after.error, InvalidTokenError)
        assert after.error.reason == TokenFailureReason.REVOKED
