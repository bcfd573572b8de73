"""End-to-end authentication flows over the in-memory orchestrator.

Tests cover:
- Registration and login by email or username
- Refresh rotation, theft detection and its aftermath
- Refresh rejected once the bound session has ended
- Concurrent refresh of the same token
- Lockout after repeated failures
- Logout (chain-wide, even with a rotated token), logout-all and session
  revocation
- Forgot/reset password, change password, and a login racing a reset
- Email confirmation and resend
- Remember-me lifetimes and the maintenance sweep

Architecture:
- Real handlers, ledgers, bcrypt (cost 4) and JWT signing
- In-memory stores, FakeClock for time
"""

import asyncio
from datetime import timedelta
from urllib.parse import parse_qs, urlparse
from uuid import UUID

import pytest

from authority.application.commands import (
    ChangePassword,
    ConfirmEmail,
    ForgotPassword,
    LogoutAllSessions,
    LogoutUser,
    RefreshTokens,
    ResendEmailConfirmation,
    ResetPassword,
    RevokeSession,
)
from authority.application.queries import ListSessions, ValidateAccessToken
from authority.core.container import create_in_memory_orchestrator
from authority.core.enums import ErrorCode
from authority.core.result import Failure, Success
from authority.domain.errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    LockedOutError,
    SecurityViolationError,
    TokenFailureReason,
)
from authority.infrastructure.memory import InMemoryUserRepository
from tests.conftest import TEST_PASSWORD, login_command, register_command

NEW_PASSWORD = "BrandNewPass456!"


async def emailed_link(orchestrator, email_service, kind="password_reset") -> dict:
    """Query parameters of the latest link of the given kind, once delivered."""
    await orchestrator.drain_email()
    url = next(m.url for m in reversed(email_service.outbox) if m.kind == kind)
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}


async def reset_token_from(orchestrator, email_service) -> str:
    return (await emailed_link(orchestrator, email_service))["token"]


class YieldingUserRepository(InMemoryUserRepository):
    """User store whose email lookup yields to other tasks after reading."""

    async def find_by_email(self, email):
        user = await super().find_by_email(email)
        await asyncio.sleep(0)
        return user


@pytest.mark.integration
class TestRegisterAndLogin:
    async def test_login_by_email_and_username(self, orchestrator, registered_user):
        by_email = await orchestrator.login(login_command("JANE@example.com"))
        by_username = await orchestrator.login(login_command("Jane_Doe"))

        assert isinstance(by_email, Success)
        assert isinstance(by_username, Success)
        assert by_email.value.user.user_id == registered_user.user_id
        assert by_email.value.session_id != by_username.value.session_id

    async def test_duplicate_registration_rejected(self, orchestrator, registered_user):
        result = await orchestrator.register(
            register_command(email="JANE@EXAMPLE.COM", username="someone_else")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.USER_ALREADY_EXISTS

    async def test_wrong_password_and_unknown_user_look_alike(
        self, orchestrator, registered_user
    ):
        wrong = await orchestrator.login(login_command(password="WrongPass123!"))
        unknown = await orchestrator.login(login_command("ghost@example.com"))

        assert wrong == unknown
        assert isinstance(wrong.error, InvalidCredentialsError)

    async def test_access_token_validates(self, orchestrator, logged_in):
        result = await orchestrator.validate_access_token(
            ValidateAccessToken(access_token=logged_in.access_token)
        )

        assert isinstance(result, Success)
        assert result.value.user_id == logged_in.user.user_id
        assert result.value.session_id == logged_in.session_id

    async def test_access_token_expires_after_15_minutes(
        self, orchestrator, logged_in, clock
    ):
        clock.advance(minutes=15)

        result = await orchestrator.validate_access_token(
            ValidateAccessToken(access_token=logged_in.access_token)
        )

        assert result.error.reason == TokenFailureReason.EXPIRED


@pytest.mark.integration
class TestLockout:
    async def test_five_failures_lock_for_30_minutes(
        self, orchestrator, registered_user, clock
    ):
        for _ in range(5):
            await orchestrator.login(login_command(password="WrongPass123!"))

        locked = await orchestrator.login(login_command())
        assert isinstance(locked.error, LockedOutError)
        assert locked.error.locked_until == clock.now() + timedelta(minutes=30)

        clock.advance(minutes=30)
        assert isinstance(await orchestrator.login(login_command()), Success)

    async def test_success_resets_failure_count(self, orchestrator, registered_user):
        for _ in range(4):
            await orchestrator.login(login_command(password="WrongPass123!"))
        await orchestrator.login(login_command())
        for _ in range(4):
            await orchestrator.login(login_command(password="WrongPass123!"))

        assert isinstance(await orchestrator.login(login_command()), Success)


@pytest.mark.integration
class TestRefreshRotation:
    async def test_refresh_rotates_token(self, orchestrator, logged_in):
        result = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )

        assert isinstance(result, Success)
        assert result.value.refresh_token != logged_in.refresh_token
        assert result.value.session_id == logged_in.session_id
        assert result.value.expires_in == 900

    async def test_stolen_token_reuse_locks_out_the_chain(self, orchestrator, logged_in):
        # Arrange: legitimate client rotates R1 -> R2
        r1 = logged_in.refresh_token
        r2 = (await orchestrator.refresh(RefreshTokens(refresh_token=r1))).value

        # Act: attacker replays R1, then the client tries R2
        replay = await orchestrator.refresh(RefreshTokens(refresh_token=r1))
        after = await orchestrator.refresh(
            RefreshTokens(refresh_token=r2.refresh_token)
        )

        # Assert
        assert isinstance(replay.error, SecurityViolationError)
        assert replay.error.user_id == logged_in.user.user_id
        assert isinstance(after.error, InvalidTokenError)
        assert after.error.reason == TokenFailureReason.REVOKED

        sessions = await orchestrator.list_sessions(
            ListSessions(user_id=logged_in.user.user_id)
        )
        assert sessions.value == []

        access = await orchestrator.validate_access_token(
            ValidateAccessToken(access_token=r2.access_token)
        )
        assert access.error.reason == TokenFailureReason.SESSION_ENDED

    async def test_theft_response_covers_other_devices(self, orchestrator, logged_in):
        other_device = (await orchestrator.login(login_command())).value
        r1 = logged_in.refresh_token
        await orchestrator.refresh(RefreshTokens(refresh_token=r1))

        await orchestrator.refresh(RefreshTokens(refresh_token=r1))

        result = await orchestrator.refresh(
            RefreshTokens(refresh_token=other_device.refresh_token)
        )
        assert result.error.reason == TokenFailureReason.REVOKED

    async def test_concurrent_refresh_has_one_winner(self, orchestrator, logged_in):
        command = RefreshTokens(refresh_token=logged_in.refresh_token)

        results = await asyncio.gather(
            orchestrator.refresh(command), orchestrator.refresh(command)
        )

        winners = [r for r in results if isinstance(r, Success)]
        losers = [r for r in results if isinstance(r, Failure)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0].error, SecurityViolationError)

    async def test_expired_refresh_token(self, orchestrator, logged_in, clock):
        clock.advance(days=7)

        result = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )

        assert result.error.reason == TokenFailureReason.EXPIRED

    async def test_unknown_refresh_token(self, orchestrator):
        result = await orchestrator.refresh(RefreshTokens(refresh_token="made-up"))

        assert result.error.reason == TokenFailureReason.NOT_FOUND

    async def test_refresh_after_session_expiry_is_rejected(
        self, orchestrator, logged_in, clock
    ):
        # Arrange: the session (1 day) ends long before the refresh token (7 days)
        clock.advance(days=2)

        # Act
        first = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )
        retry = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )

        # Assert: rejected with the chain revoked, and a retry is not theft
        assert isinstance(first.error, InvalidTokenError)
        assert first.error.reason == TokenFailureReason.SESSION_ENDED
        assert isinstance(retry.error, InvalidTokenError)
        assert retry.error.reason == TokenFailureReason.REVOKED

    async def test_remember_me_extends_lifetimes(self, orchestrator, registered_user, clock):
        tokens = (await orchestrator.login(login_command(remember_me=True))).value
        clock.advance(days=29)

        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=tokens.refresh_token)
        )
        sessions = await orchestrator.list_sessions(
            ListSessions(user_id=registered_user.user_id)
        )

        assert isinstance(refreshed, Success)
        assert [s.session_id for s in sessions.value] == [tokens.session_id]


@pytest.mark.integration
class TestLogout:
    async def test_logout_revokes_token_and_ends_session(self, orchestrator, logged_in):
        user_id = logged_in.user.user_id

        result = await orchestrator.logout(
            LogoutUser(user_id=user_id, refresh_token=logged_in.refresh_token)
        )

        assert result == Success(value=None)
        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )
        assert refreshed.error.reason == TokenFailureReason.REVOKED
        access = await orchestrator.validate_access_token(
            ValidateAccessToken(access_token=logged_in.access_token)
        )
        assert access.error.reason == TokenFailureReason.SESSION_ENDED

    async def test_logout_with_rotated_token_ends_its_successor(
        self, orchestrator, logged_in
    ):
        user_id = logged_in.user.user_id
        r1 = logged_in.refresh_token
        r2 = (await orchestrator.refresh(RefreshTokens(refresh_token=r1))).value

        await orchestrator.logout(LogoutUser(user_id=user_id, refresh_token=r1))

        after = await orchestrator.refresh(
            RefreshTokens(refresh_token=r2.refresh_token)
        )
        assert isinstance(after.error, InvalidTokenError)
        assert after.error.reason == TokenFailureReason.REVOKED

    async def test_logout_all(self, orchestrator, logged_in):
        second = (await orchestrator.login(login_command())).value
        user_id = logged_in.user.user_id

        result = await orchestrator.logout_all(LogoutAllSessions(user_id=user_id))

        assert result == Success(value=2)
        for tokens in (logged_in, second):
            refreshed = await orchestrator.refresh(
                RefreshTokens(refresh_token=tokens.refresh_token)
            )
            assert isinstance(refreshed.error, InvalidTokenError)
        sessions = await orchestrator.list_sessions(ListSessions(user_id=user_id))
        assert sessions.value == []

    async def test_revoke_other_device_session(self, orchestrator, logged_in):
        other = (await orchestrator.login(login_command())).value
        user_id = logged_in.user.user_id

        result = await orchestrator.revoke_session(
            RevokeSession(user_id=user_id, session_id=other.session_id)
        )

        assert result == Success(value=None)
        sessions = await orchestrator.list_sessions(
            ListSessions(user_id=user_id, current_session_id=logged_in.session_id)
        )
        assert [(s.session_id, s.is_current) for s in sessions.value] == [
            (logged_in.session_id, True)
        ]
        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=other.refresh_token)
        )
        assert refreshed.error.reason == TokenFailureReason.REVOKED

    async def test_cannot_revoke_someone_elses_session(self, orchestrator, logged_in):
        await orchestrator.register(
            register_command(email="bob@example.com", username="bob")
        )
        bob = (await orchestrator.login(login_command("bob"))).value

        result = await orchestrator.revoke_session(
            RevokeSession(user_id=bob.user.user_id, session_id=logged_in.session_id)
        )

        assert result.error.code == ErrorCode.SESSION_NOT_FOUND


@pytest.mark.integration
class TestPasswordFlows:
    async def test_forgot_password_responses_are_identical(
        self, orchestrator, registered_user, email_service
    ):
        known = await orchestrator.forgot_password(
            ForgotPassword(email="jane@example.com")
        )
        unknown = await orchestrator.forgot_password(
            ForgotPassword(email="ghost@example.com")
        )

        assert known == unknown == Success(value=None)
        await orchestrator.drain_email()
        resets = [m for m in email_service.outbox if m.kind == "password_reset"]
        assert [m.to_email for m in resets] == ["jane@example.com"]

    async def test_reset_password_end_to_end(
        self, orchestrator, logged_in, email_service
    ):
        await orchestrator.forgot_password(ForgotPassword(email="jane@example.com"))
        token = await reset_token_from(orchestrator, email_service)

        first = await orchestrator.reset_password(
            ResetPassword(token=token, new_password=NEW_PASSWORD)
        )
        second = await orchestrator.reset_password(
            ResetPassword(token=token, new_password=NEW_PASSWORD)
        )

        assert first == Success(value=1)
        assert second.error.reason == TokenFailureReason.ALREADY_USED
        await orchestrator.drain_email()
        assert email_service.outbox[-1].kind == "password_changed"
        old = await orchestrator.login(login_command(password=TEST_PASSWORD))
        new = await orchestrator.login(login_command(password=NEW_PASSWORD))
        assert isinstance(old.error, InvalidCredentialsError)
        assert isinstance(new, Success)
        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )
        assert refreshed.error.reason == TokenFailureReason.REVOKED

    async def test_weak_reset_password_keeps_token_usable(
        self, orchestrator, registered_user, email_service
    ):
        await orchestrator.forgot_password(ForgotPassword(email="jane@example.com"))
        token = await reset_token_from(orchestrator, email_service)

        weak = await orchestrator.reset_password(
            ResetPassword(token=token, new_password="weak")
        )
        strong = await orchestrator.reset_password(
            ResetPassword(token=token, new_password=NEW_PASSWORD)
        )

        assert weak.error.code == ErrorCode.PASSWORD_TOO_WEAK
        assert isinstance(strong, Success)

    async def test_reset_token_expires_after_24_hours(
        self, orchestrator, registered_user, email_service, clock
    ):
        await orchestrator.forgot_password(ForgotPassword(email="jane@example.com"))
        token = await reset_token_from(orchestrator, email_service)
        clock.advance(hours=24)

        result = await orchestrator.reset_password(
            ResetPassword(token=token, new_password=NEW_PASSWORD)
        )

        assert result.error.reason == TokenFailureReason.EXPIRED

    async def test_login_racing_a_reset_cannot_restore_the_old_password(
        self, settings, clock, logger, email_service, password_service
    ):
        # Arrange: login reads the user, then yields before recording the outcome
        users = YieldingUserRepository()
        auth = create_in_memory_orchestrator(
            settings,
            users=users,
            clock=clock,
            logger=logger,
            email=email_service,
            hasher=password_service,
        )
        await auth.register(register_command())
        await auth.forgot_password(ForgotPassword(email="jane@example.com"))
        token = await reset_token_from(auth, email_service)

        # Act: the reset lands while the login holds the old row
        await asyncio.gather(
            auth.login(login_command()),
            auth.reset_password(ResetPassword(token=token, new_password=NEW_PASSWORD)),
        )

        # Assert
        old = await auth.login(login_command(password=TEST_PASSWORD))
        new = await auth.login(login_command(password=NEW_PASSWORD))
        assert isinstance(old.error, InvalidCredentialsError)
        assert isinstance(new, Success)
        await auth.drain_email()

    async def test_change_password_revokes_refresh_tokens(self, orchestrator, logged_in):
        result = await orchestrator.change_password(
            ChangePassword(
                user_id=logged_in.user.user_id,
                current_password=TEST_PASSWORD,
                new_password=NEW_PASSWORD,
            )
        )

        assert result == Success(value=1)
        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=logged_in.refresh_token)
        )
        assert refreshed.error.reason == TokenFailureReason.REVOKED
        assert isinstance(
            await orchestrator.login(login_command(password=NEW_PASSWORD)), Success
        )


@pytest.mark.integration
class TestSweep:
    async def test_sweep_removes_only_expired_rows(
        self, orchestrator, logged_in, email_service, clock
    ):
        await orchestrator.forgot_password(ForgotPassword(email="jane@example.com"))
        clock.advance(days=1)
        fresh = (await orchestrator.login(login_command())).value

        report = (await orchestrator.sweep_expired()).value

        assert report.sessions == 1
        assert report.reset_tokens == 1
        assert report.refresh_tokens == 0
        refreshed = await orchestrator.refresh(
            RefreshTokens(refresh_token=fresh.refresh_token)
        )
        assert isinstance(refreshed, Success)


@pytest.mark.integration
class TestEmailConfirmation:
    async def confirmation_link(self, orchestrator, email_service):
        link = await emailed_link(orchestrator, email_service, kind="email_confirmation")
        return UUID(link["user_id"]), link["token"]

    async def test_register_then_confirm(self, orchestrator, registered_user, email_service):
        user_id, token = await self.confirmation_link(orchestrator, email_service)

        confirmed = await orchestrator.confirm_email(
            ConfirmEmail(user_id=user_id, token=token)
        )
        again = await orchestrator.confirm_email(ConfirmEmail(user_id=user_id, token=token))

        assert user_id == registered_user.user_id
        assert registered_user.email_confirmed is False
        assert confirmed == Success(value=None)
        assert again.error.reason == TokenFailureReason.ALREADY_USED
        profile = (await orchestrator.login(login_command())).value.user
        assert profile.email_confirmed is True

    async def test_wrong_token_leaves_email_unconfirmed(
        self, orchestrator, registered_user, email_service
    ):
        result = await orchestrator.confirm_email(
            ConfirmEmail(user_id=registered_user.user_id, token="not-the-token")
        )

        assert isinstance(result.error, InvalidTokenError)
        assert result.error.reason == TokenFailureReason.NOT_FOUND
        profile = (await orchestrator.login(login_command())).value.user
        assert profile.email_confirmed is False

    async def test_resend_replaces_the_link(
        self, orchestrator, registered_user, email_service
    ):
        user_id, first_token = await self.confirmation_link(orchestrator, email_service)

        resent = await orchestrator.resend_email_confirmation(
            ResendEmailConfirmation(email="JANE@example.com")
        )
        _, second_token = await self.confirmation_link(orchestrator, email_service)

        assert resent == Success(value=None)
        assert second_token != first_token
        stale = await orchestrator.confirm_email(
            ConfirmEmail(user_id=user_id, token=first_token)
        )
        fresh = await orchestrator.confirm_email(
            ConfirmEmail(user_id=user_id, token=second_token)
        )
        assert stale.error.reason == TokenFailureReason.NOT_FOUND
        assert fresh == Success(value=None)

    async def test_resend_for_unknown_email_looks_the_same(
        self, orchestrator, registered_user, email_service
    ):
        await orchestrator.drain_email()
        sent_before = len(email_service.outbox)

        result = await orchestrator.resend_email_confirmation(
            ResendEmailConfirmation(email="ghost@example.com")
        )

        await orchestrator.drain_email()
        assert result == Success(value=None)
        assert len(email_service.outbox) == sent_before
