"""Password reset ledger.

Single-use, short-lived tokens gating a password change. Requesting a new
token never blocks on earlier ones, but consuming any token invalidates all
of the user's outstanding tokens, so an older email link cannot be replayed
after a reset went through.
"""

from datetime import timedelta
from uuid import UUID

from authority.core.result import Failure, Result, Success
from authority.domain.entities import PasswordResetToken
from authority.domain.errors import InvalidTokenError, TokenFailureReason
from authority.domain.protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    LoggerProtocol,
    PasswordResetTokenRepository,
    SecretTokenGeneratorProtocol,
)


class PasswordResetLedger:
    """Issue, consume and sweep password reset tokens."""

    def __init__(
        self,
        *,
        reset_token_repo: PasswordResetTokenRepository,
        clock: ClockProtocol,
        id_generator: IdGeneratorProtocol,
        token_generator: SecretTokenGeneratorProtocol,
        logger: LoggerProtocol,
        lifetime: timedelta,
    ) -> None:
        self._repo = reset_token_repo
        self._clock = clock
        self._ids = id_generator
        self._tokens = token_generator
        self._logger = logger
        self._lifetime = lifetime

    async def request_reset(
        self, user_id: UUID, client_ip: str | None = None
    ) -> PasswordResetToken:
        """Issue a reset token for an existing user."""
        now = self._clock.now()
        token = PasswordResetToken(
            id=self._ids.new_id(),
            user_id=user_id,
            token=self._tokens.new_token(),
            expires_at=now + self._lifetime,
            created_at=now,
            ip_address=client_ip,
        )
        await self._repo.save(token)
        self._logger.info("password_reset_token_issued", user_id=str(user_id))
        return token

    async def consume(
        self, token: str
    ) -> Result[PasswordResetToken, InvalidTokenError]:
        """Consume a reset token exactly once.

        Returns:
            Success with the consumed token (its user_id names the user), or
            Failure(InvalidTokenError) with reason NOT_FOUND, EXPIRED or
            ALREADY_USED.
        """
        now = self._clock.now()

        reset_token = await self._repo.find_by_token(token)
        if reset_token is None:
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))
        if reset_token.is_expired(now):
            return Failure(error=InvalidTokenError.because(TokenFailureReason.EXPIRED))
        if reset_token.is_used:
            return Failure(
                error=InvalidTokenError.because(TokenFailureReason.ALREADY_USED)
            )

        # Only one concurrent consumer may flip is_used
        if not await self._repo.mark_as_used(reset_token.id, now):
            return Failure(
                error=InvalidTokenError.because(TokenFailureReason.ALREADY_USED)
            )

        invalidated = await self._repo.invalidate_all_for_user(reset_token.user_id, now)
        self._logger.info(
            "password_reset_token_consumed",
            user_id=str(reset_token.user_id),
            invalidated_tokens=invalidated,
        )
        reset_token.is_used = True
        reset_token.used_at = now
        return Success(value=reset_token)

    async def sweep_expired(self) -> int:
        return await self._repo.delete_expired(self._clock.now())
