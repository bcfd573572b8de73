"""Unit tests for PasswordResetLedger."""

from datetime import timedelta
from unittest.mock import Mock

import pytest
from uuid_extensions import uuid7

from authority.application.services import PasswordResetLedger
from authority.core.enums import ErrorCode
from authority.core.result import Failure, Success
from authority.domain.errors import TokenFailureReason
from authority.infrastructure.memory import InMemoryPasswordResetTokenRepository
from authority.infrastructure.runtime import UUID7Generator
from authority.infrastructure.security import SecureTokenGenerator


@pytest.fixture
def repo():
    return InMemoryPasswordResetTokenRepository()


@pytest.fixture
def ledger(repo, clock):
    return PasswordResetLedger(
        reset_token_repo=repo,
        clock=clock,
        id_generator=UUID7Generator(),
        token_generator=SecureTokenGenerator(),
        logger=Mock(),
        lifetime=timedelta(hours=24),
    )


@pytest.mark.unit
class TestPasswordResetLedger:
    async def test_request_reset_issues_24h_token(self, ledger, clock):
        token = await ledger.request_reset(uuid7(), client_ip="10.0.0.1")

        assert token.expires_at == clock.now() + timedelta(hours=24)
        assert token.ip_address == "10.0.0.1"
        assert token.is_used is False

    async def test_consume_once(self, ledger):
        user_id = uuid7()
        token = await ledger.request_reset(user_id)

        first = await ledger.consume(token.token)
        second = await ledger.consume(token.token)

        assert isinstance(first, Success)
        assert first.value.user_id == user_id
        assert first.value.is_used is True
        assert isinstance(second, Failure)
        assert second.error.reason == TokenFailureReason.ALREADY_USED
        assert second.error.code == ErrorCode.TOKEN_ALREADY_USED

    async def test_consume_invalidates_older_tokens(self, ledger):
        user_id = uuid7()
        older = await ledger.request_reset(user_id)
        newer = await ledger.request_reset(user_id)

        await ledger.consume(newer.token)
        result = await ledger.consume(older.token)

        assert result.error.reason == TokenFailureReason.ALREADY_USED

    async def test_expired_token(self, ledger, clock):
        token = await ledger.request_reset(uuid7())
        clock.advance(hours=24)

        result = await ledger.consume(token.token)

        assert result.error.reason == TokenFailureReason.EXPIRED

    async def test_unknown_token(self, ledger):
        result = await ledger.consume("nope")

        assert result.error.reason == TokenFailureReason.NOT_FOUND

    async def test_sweep_expired(self, ledger, clock):
        await ledger.request_reset(uuid7())
        clock.advance(hours=23)
        await ledger.request_reset(uuid7())
        clock.advance(hours=1)

        assert await ledger.sweep_expired() == 1
