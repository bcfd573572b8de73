"""Refresh token ledger.

Owns the rotation chains of refresh tokens and the theft response.

Rotation (rotate):
    1. Unknown token                      -> InvalidTokenError(NOT_FOUND)
    2. Expired (checked before anything)  -> InvalidTokenError(EXPIRED)
    3. Rotated away already (used)        -> revoke the whole chain,
                                             SecurityViolationError
    4. Revoked for any other reason       -> InvalidTokenError(REVOKED)
    5. Otherwise win the compare-and-set on "not used, not revoked", which
       retires the token and stores its successor (same chain, fresh JWT id)
       in one write. Losing the compare-and-set re-reads the token: if a
       concurrent revoke got there first it is InvalidTokenError(REVOKED),
       if another rotation won it is handled exactly like step 3.

Every token in a chain carries the chain root's id (chain_id), so revoking a
chain is a single indexed write rather than a walk over replaced_by_token
pointers.
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from authority.core.constants import REASON_REPLACED, REASON_REUSE_DETECTED
from authority.core.result import Failure, Result, Success
from authority.domain.entities import RefreshToken, RefreshTokenState
from authority.domain.errors import (
    InvalidTokenError,
    SecurityViolationError,
    TokenFailureReason,
)
from authority.domain.protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    LoggerProtocol,
    RefreshTokenRepository,
    SecretTokenGeneratorProtocol,
)


@dataclass(frozen=True, kw_only=True)
class RotationResult:
    """Outcome of a successful rotation.

    Attributes:
        user_id: Owner of the chain.
        session_id: Session bound to the chain (may be None).
        jwt_id: Id to give the access token minted for this rotation.
        refresh_token: The successor token.
    """

    user_id: UUID
    session_id: str | None
    jwt_id: str
    refresh_token: RefreshToken


@dataclass(frozen=True, kw_only=True)
class TokenUsageStats:
    """Counts of a user's refresh tokens by state."""

    total: int
    active: int
    expired: int
    revoked: int


class RefreshTokenLedger:
    """Issue, rotate, revoke and sweep refresh tokens."""

    def __init__(
        self,
        *,
        refresh_token_repo: RefreshTokenRepository,
        clock: ClockProtocol,
        id_generator: IdGeneratorProtocol,
        token_generator: SecretTokenGeneratorProtocol,
        logger: LoggerProtocol,
        lifetime: timedelta,
        remember_me_lifetime: timedelta,
    ) -> None:
        self._repo = refresh_token_repo
        self._clock = clock
        self._ids = id_generator
        self._tokens = token_generator
        self._logger = logger
        self._lifetime = lifetime
        self._remember_me_lifetime = remember_me_lifetime

    async def issue(
        self,
        *,
        user_id: UUID,
        jwt_id: str,
        client_ip: str | None = None,
        session_id: str | None = None,
        remember_me: bool = False,
    ) -> RefreshToken:
        """Issue the root token of a new rotation chain."""
        now = self._clock.now()
        token_id = self._ids.new_id()
        lifetime = self._remember_me_lifetime if remember_me else self._lifetime
        token = RefreshToken(
            id=token_id,
            user_id=user_id,
            token=self._tokens.new_token(),
            jwt_id=jwt_id,
            chain_id=token_id,
            session_id=session_id,
            expires_at=now + lifetime,
            created_at=now,
            created_by_ip=client_ip,
        )
        await self._repo.save(token)
        self._logger.debug(
            "refresh_token_issued",
            user_id=str(user_id),
            chain_id=str(token_id),
            session_id=session_id,
        )
        return token

    async def rotate(
        self, presented_token: str, client_ip: str | None = None
    ) -> Result[RotationResult, InvalidTokenError | SecurityViolationError]:
        """Exchange a refresh token for its successor.

        Args:
            presented_token: Opaque token value presented by the client.
            client_ip: Client IP, recorded on both tokens.

        Returns:
            Success(RotationResult), or Failure with InvalidTokenError
            (not found, expired, revoked) or SecurityViolationError (reuse).
        """
        now = self._clock.now()

        # Step 1: Look up token
        current = await self._repo.find_by_token(presented_token)
        if current is None:
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))

        # Step 2: Expiry wins over every other state
        if current.is_expired(now):
            return Failure(error=InvalidTokenError.because(TokenFailureReason.EXPIRED))

        # Step 3: Reuse of a rotated-away token
        if current.is_used:
            return Failure(error=await self._respond_to_reuse(current, client_ip))

        # Step 4: Revoked by logout, password change or a theft response
        if current.is_revoked:
            return Failure(error=InvalidTokenError.because(TokenFailureReason.REVOKED))

        # Step 5: Build the successor in the same chain, keeping its lifetime
        jwt_id = str(self._ids.new_id())
        successor = RefreshToken(
            id=self._ids.new_id(),
            user_id=current.user_id,
            token=self._tokens.new_token(),
            jwt_id=jwt_id,
            chain_id=current.chain_id,
            session_id=current.session_id,
            expires_at=now + (current.expires_at - current.created_at),
            created_at=now,
            created_by_ip=client_ip,
        )

        # Step 6: Retire current and store successor in one write (compare-and-set)
        won = await self._repo.rotate(
            current.id,
            successor,
            now=now,
            client_ip=client_ip,
            reason=REASON_REPLACED,
        )
        if not won:
            return Failure(error=await self._respond_to_lost_race(current, client_ip))

        self._logger.debug(
            "refresh_token_rotated",
            user_id=str(current.user_id),
            chain_id=str(current.chain_id),
        )
        return Success(
            value=RotationResult(
                user_id=current.user_id,
                session_id=current.session_id,
                jwt_id=jwt_id,
                refresh_token=successor,
            )
        )

    async def _respond_to_lost_race(
        self, token: RefreshToken, client_ip: str | None
    ) -> InvalidTokenError | SecurityViolationError:
        # A concurrent revoke (logout, password change) leaves is_used unset.
        latest = await self._repo.find_by_token(token.token)
        if latest is not None and not latest.is_used:
            return InvalidTokenError.because(TokenFailureReason.REVOKED)
        return await self._respond_to_reuse(token, client_ip)

    async def _respond_to_reuse(
        self, token: RefreshToken, client_ip: str | None
    ) -> SecurityViolationError:
        revoked = await self._repo.revoke_chain(
            token.chain_id,
            now=self._clock.now(),
            client_ip=client_ip,
            reason=REASON_REUSE_DETECTED,
        )
        self._logger.warning(
            "refresh_token_reuse_detected",
            user_id=str(token.user_id),
            chain_id=str(token.chain_id),
            client_ip=client_ip,
            revoked_tokens=revoked,
        )
        return SecurityViolationError(user_id=token.user_id, revoked_tokens=revoked)

    async def revoke(
        self, token: str, *, client_ip: str | None = None, reason: str
    ) -> bool:
        """Revoke one token. Unknown or already revoked tokens are a no-op."""
        return await self._repo.revoke(
            token, now=self._clock.now(), client_ip=client_ip, reason=reason
        )

    async def revoke_chain(
        self, chain_id: UUID, *, client_ip: str | None = None, reason: str
    ) -> int:
        """Revoke every active token of a rotation chain."""
        return await self._repo.revoke_chain(
            chain_id, now=self._clock.now(), client_ip=client_ip, reason=reason
        )

    async def find(self, token: str) -> RefreshToken | None:
        return await self._repo.find_by_token(token)

    async def revoke_all_for_user(
        self, user_id: UUID, *, client_ip: str | None = None, reason: str
    ) -> int:
        """Revoke every active token of the user."""
        count = await self._repo.revoke_all_for_user(
            user_id, now=self._clock.now(), client_ip=client_ip, reason=reason
        )
        self._logger.info(
            "refresh_tokens_revoked", user_id=str(user_id), reason=reason, count=count
        )
        return count

    async def revoke_by_session(
        self, session_id: str, *, client_ip: str | None = None, reason: str
    ) -> int:
        return await self._repo.revoke_by_session(
            session_id, now=self._clock.now(), client_ip=client_ip, reason=reason
        )

    async def sweep_expired(self) -> int:
        """Delete tokens past their expiry. Safe alongside live traffic."""
        return await self._repo.delete_expired(self._clock.now())

    async def usage_stats(self, user_id: UUID) -> TokenUsageStats:
        """Summarize a user's tokens.

        Rotated tokens count as revoked. Expired tokens are counted as expired
        whatever their other flags.
        """
        now = self._clock.now()
        states = [t.state(now) for t in await self._repo.find_by_user_id(user_id)]
        return TokenUsageStats(
            total=len(states),
            active=states.count(RefreshTokenState.ACTIVE),
            expired=states.count(RefreshTokenState.EXPIRED),
            revoked=states.count(RefreshTokenState.REVOKED)
            + states.count(RefreshTokenState.ROTATED),
        )
