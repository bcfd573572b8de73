"""Unit tests for domain entities.

Tests cover:
- User lockout counting, lock window and reset on success
- RefreshToken lifecycle state and idempotent revocation
- UserSession validity, touch and close
- PasswordResetToken validity
"""

from datetime import UTC, datetime, timedelta

import pytest
from uuid_extensions import uuid7

from authority.domain.entities import (
    PasswordResetToken,
    RefreshToken,
    RefreshTokenState,
    User,
    UserSession,
)

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
WINDOW = timedelta(minutes=30)


def create_user(**overrides) -> User:
    values = {
        "id": uuid7(),
        "email": "jane@example.com",
        "username": "jane_doe",
        "display_name": "Jane Doe",
        "password_hash": "hashed",
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return User(**values)


def create_refresh_token(**overrides) -> RefreshToken:
    token_id = uuid7()
    values = {
        "id": token_id,
        "user_id": uuid7(),
        "token": "opaque-token",
        "jwt_id": "jti-1",
        "chain_id": token_id,
        "expires_at": NOW + timedelta(days=7),
        "created_at": NOW,
    }
    values.update(overrides)
    return RefreshToken(**values)


def create_session(**overrides) -> UserSession:
    values = {
        "id": uuid7(),
        "session_id": "session-1",
        "user_id": uuid7(),
        "last_activity_at": NOW,
        "expires_at": NOW + timedelta(days=1),
        "created_at": NOW,
    }
    values.update(overrides)
    return UserSession(**values)


@pytest.mark.unit
class TestUserLockout:
    """Test failed login counting and the lockout window."""

    def test_failures_below_threshold_do_not_lock(self):
        user = create_user()

        for _ in range(4):
            locked = user.record_failed_login(NOW, threshold=5, window=WINDOW)

        assert locked is False
        assert user.failed_login_attempts == 4
        assert user.is_locked(NOW) is False

    def test_threshold_failure_locks_and_resets_counter(self):
        user = create_user(failed_login_attempts=4)

        locked = user.record_failed_login(NOW, threshold=5, window=WINDOW)

        assert locked is True
        assert user.locked_until == NOW + WINDOW
        assert user.failed_login_attempts == 0

    def test_lock_lifts_exactly_at_locked_until(self):
        user = create_user(locked_until=NOW + WINDOW)

        assert user.is_locked(NOW + WINDOW - timedelta(seconds=1)) is True
        assert user.is_locked(NOW + WINDOW) is False

    def test_successful_login_clears_lockout_state(self):
        user = create_user(failed_login_attempts=3, locked_until=NOW - WINDOW)

        user.record_successful_login(NOW)

        assert user.failed_login_attempts == 0
        assert user.locked_until is None
        assert user.last_login_at == NOW


@pytest.mark.unit
class TestRefreshTokenState:
    """Test derived lifecycle state."""

    def test_new_token_is_active(self):
        token = create_refresh_token()

        assert token.state(NOW) == RefreshTokenState.ACTIVE
        assert token.is_active(NOW) is True

    def test_expired_exactly_at_expires_at(self):
        token = create_refresh_token()

        assert token.is_expired(token.expires_at - timedelta(microseconds=1)) is False
        assert token.is_expired(token.expires_at) is True
        assert token.state(token.expires_at) == RefreshTokenState.EXPIRED

    def test_rotated_token_reports_rotated(self):
        token = create_refresh_token(
            is_used=True, is_revoked=True, replaced_by_token="successor"
        )

        assert token.state(NOW) == RefreshTokenState.ROTATED
        assert token.is_active(NOW) is False

    def test_revoke_sets_metadata_once(self):
        token = create_refresh_token()

        first = token.revoke(NOW, reason="logout", client_ip="10.0.0.1")
        second = token.revoke(NOW + WINDOW, reason="again", client_ip=None)

        assert first is True
        assert second is False
        assert token.state(NOW) == RefreshTokenState.REVOKED
        assert token.revoked_at == NOW
        assert token.revoked_reason == "logout"
        assert token.revoked_by_ip == "10.0.0.1"


@pytest.mark.unit
class TestUserSession:
    """Test session validity, activity and closing."""

    def test_touch_updates_activity_on_valid_session(self):
        session = create_session()
        later = NOW + timedelta(minutes=5)

        assert session.touch(later) is True
        assert session.last_activity_at == later

    def test_touch_is_noop_on_expired_session(self):
        session = create_session()

        assert session.touch(session.expires_at) is False
        assert session.last_activity_at == NOW

    def test_close_deactivates_once(self):
        session = create_session()

        assert session.close(NOW) is True
        assert session.close(NOW + WINDOW) is False
        assert session.is_active is False
        assert session.ended_at == NOW
        assert session.is_valid(NOW) is False

    def test_touch_is_noop_on_closed_session(self):
        session = create_session(is_active=False)

        assert session.touch(NOW) is False


@pytest.mark.unit
class TestPasswordResetToken:
    def test_valid_until_used_or_expired(self):
        token = PasswordResetToken(
            id=uuid7(),
            user_id=uuid7(),
            token="reset",
            expires_at=NOW + timedelta(hours=24),
            created_at=NOW,
        )

        assert token.is_valid(NOW) is True
        assert token.is_valid(token.expires_at) is False

        token.is_used = True
        assert token.is_valid(NOW) is False
