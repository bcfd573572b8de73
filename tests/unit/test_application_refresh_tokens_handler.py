"""Unit tests for RefreshTokensHandler.

Tests cover:
- Successful refresh (session touched, access token minted with rotation jti)
- Ended session: chain revoked before rotation, no access token minted
- Theft response (all tokens revoked, all sessions closed)
- Plain invalid tokens passed through
- Owner deleted since issuance
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from authority.application.commands import RefreshTokens
from authority.application.commands.handlers.refresh_tokens_handler import (
    RefreshTokensHandler,
)
from authority.application.services import RotationResult
from authority.core.constants import REASON_REUSE_DETECTED, REASON_SESSION_ENDED
from authority.core.result import Failure, Success
from authority.domain.errors import (
    InvalidTokenError,
    SecurityViolationError,
    TokenFailureReason,
)
from tests.conftest import FakeClock

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


def presented_token(*, active=True, session_id="session-1"):
    token = Mock(user_id=uuid7(), chain_id=uuid7(), session_id=session_id)
    token.is_active.return_value = active
    return token


def create_handler(rotate_result, user=None, presented=None, session_alive=True):
    credential_store = AsyncMock()
    credential_store.find_by_id.return_value = user
    session_registry = AsyncMock()
    session_registry.close_all_for_user.return_value = 2
    session_registry.touch.return_value = session_alive
    ledger = AsyncMock()
    ledger.find.return_value = presented
    ledger.rotate.return_value = rotate_result
    ledger.revoke_all_for_user.return_value = 3
    ledger.revoke_chain.return_value = 1
    issuer = Mock(expires_in=900)
    issuer.mint.return_value = "access-2"
    handler = RefreshTokensHandler(
        credential_store=credential_store,
        session_registry=session_registry,
        refresh_token_ledger=ledger,
        access_token_issuer=issuer,
        clock=FakeClock(NOW),
        logger=Mock(),
    )
    return handler, credential_store, session_registry, ledger, issuer


@pytest.mark.unit
class TestRefreshTokensHandler:
    async def test_refresh_success(self):
        # Arrange
        user = Mock(
            id=uuid7(),
            email="jane@example.com",
            username="jane_doe",
            display_name="Jane Doe",
            email_confirmed=False,
            last_login_at=None,
        )
        rotation = RotationResult(
            user_id=user.id,
            session_id="session-1",
            jwt_id="jti-2",
            refresh_token=Mock(token="refresh-2"),
        )
        handler, _, sessions, _, issuer = create_handler(
            Success(value=rotation), user=user, presented=presented_token()
        )

        # Act
        result = await handler.handle(RefreshTokens(refresh_token="refresh-1"))

        # Assert
        assert isinstance(result, Success)
        assert result.value.access_token == "access-2"
        assert result.value.refresh_token == "refresh-2"
        assert result.value.session_id == "session-1"
        sessions.touch.assert_awaited_once_with("session-1")
        issuer.mint.assert_called_once_with(user, jwt_id="jti-2", session_id="session-1")

    async def test_ended_session_rejects_refresh_and_revokes_chain(self):
        # Arrange: the token is live but its session has expired
        presented = presented_token()
        handler, store, _, ledger, issuer = create_handler(
            Success(value=Mock()), presented=presented, session_alive=False
        )

        # Act
        result = await handler.handle(
            RefreshTokens(refresh_token="refresh-1", client_ip="1.2.3.4")
        )

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, InvalidTokenError)
        assert result.error.reason == TokenFailureReason.SESSION_ENDED
        ledger.revoke_chain.assert_awaited_once_with(
            presented.chain_id, client_ip="1.2.3.4", reason=REASON_SESSION_ENDED
        )
        presented.is_active.assert_called_once_with(NOW)
        ledger.rotate.assert_not_awaited()
        store.find_by_id.assert_not_awaited()
        issuer.mint.assert_not_called()

    async def test_spent_token_skips_session_check(self):
        # A used or revoked token goes to the ledger, which decides reuse
        error = InvalidTokenError.because(TokenFailureReason.REVOKED)
        handler, _, sessions, ledger, _ = create_handler(
            Failure(error=error), presented=presented_token(active=False)
        )

        result = await handler.handle(RefreshTokens(refresh_token="old"))

        assert result == Failure(error=error)
        sessions.touch.assert_not_awaited()
        ledger.revoke_chain.assert_not_awaited()

    async def test_reuse_revokes_everything_for_user(self):
        user_id = uuid7()
        violation = SecurityViolationError(user_id=user_id, revoked_tokens=1)
        handler, _, sessions, ledger, _ = create_handler(Failure(error=violation))

        result = await handler.handle(
            RefreshTokens(refresh_token="stolen", client_ip="6.6.6.6")
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, SecurityViolationError)
        assert result.error.revoked_tokens == 4
        ledger.revoke_all_for_user.assert_awaited_once_with(
            user_id, client_ip="6.6.6.6", reason=REASON_REUSE_DETECTED
        )
        sessions.close_all_for_user.assert_awaited_once_with(user_id)

    async def test_invalid_token_passed_through(self):
        error = InvalidTokenError.because(TokenFailureReason.EXPIRED)
        handler, _, sessions, ledger, _ = create_handler(Failure(error=error))

        result = await handler.handle(RefreshTokens(refresh_token="old"))

        assert result == Failure(error=error)
        ledger.revoke_all_for_user.assert_not_awaited()
        sessions.close_all_for_user.assert_not_awaited()

    async def test_deleted_owner_invalidates_token(self):
        rotation = RotationResult(
            user_id=uuid7(), session_id=None, jwt_id="j", refresh_token=Mock()
        )
        handler, _, _, ledger, issuer = create_handler(
            Success(value=rotation), user=None, presented=presented_token(session_id=None)
        )

        result = await handler.handle(RefreshTokens(refresh_token="orphan"))

        assert isinstance(result.error, InvalidTokenError)
        assert result.error.reason == TokenFailureReason.NOT_FOUND
        ledger.revoke_all_for_user.assert_awaited_once()
        issuer.mint.assert_not_called()
