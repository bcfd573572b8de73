"""Refresh Tokens handler.

Flow:
1. A live token whose session has closed or expired revokes its chain and
   fails with SESSION_ENDED; otherwise the session is touched
2. Rotate the presented refresh token (ledger)
3. On reuse: revoke every token of the user, close every session of the
   user, surface SecurityViolationError so the caller forces a full re-login
4. On not-found/expired/revoked: surface InvalidTokenError
5. Load the owner (a deleted owner invalidates the token)
6. Mint the access token with the rotation's JWT id
7. Return Success(AuthTokens)

The session check runs before rotation, so a token rejected for its session
is revoked but never marked used; presenting it again is REVOKED, not reuse.
"""

from authority.application.commands.auth_commands import RefreshTokens
from authority.application.dtos import AuthTokens, UserProfile
from authority.application.services import (
    AccessTokenIssuer,
    CredentialStore,
    RefreshTokenLedger,
    SessionRegistry,
)
from authority.core.constants import REASON_REUSE_DETECTED, REASON_SESSION_ENDED
from authority.core.result import Failure, Result, Success
from authority.domain.errors import (
    InvalidTokenError,
    SecurityViolationError,
    TokenFailureReason,
)
from authority.domain.protocols import ClockProtocol, LoggerProtocol


class RefreshTokensHandler:
    """Handler for refresh command."""

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        session_registry: SessionRegistry,
        refresh_token_ledger: RefreshTokenLedger,
        access_token_issuer: AccessTokenIssuer,
        clock: ClockProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._credential_store = credential_store
        self._session_registry = session_registry
        self._refresh_token_ledger = refresh_token_ledger
        self._access_token_issuer = access_token_issuer
        self._clock = clock
        self._logger = logger

    async def handle(
        self, cmd: RefreshTokens
    ) -> Result[AuthTokens, InvalidTokenError | SecurityViolationError]:
        """Handle refresh command.

        Returns:
            Success(AuthTokens), Failure(InvalidTokenError) or
            Failure(SecurityViolationError).
        """
        # Step 1: The chain dies with its session
        presented = await self._refresh_token_ledger.find(cmd.refresh_token)
        if (
            presented is not None
            and presented.session_id is not None
            and presented.is_active(self._clock.now())
            and not await self._session_registry.touch(presented.session_id)
        ):
            revoked = await self._refresh_token_ledger.revoke_chain(
                presented.chain_id,
                client_ip=cmd.client_ip,
                reason=REASON_SESSION_ENDED,
            )
            self._logger.info(
                "refresh_rejected",
                reason=TokenFailureReason.SESSION_ENDED.value,
                user_id=str(presented.user_id),
                revoked_tokens=revoked,
            )
            return Failure(
                error=InvalidTokenError.because(TokenFailureReason.SESSION_ENDED)
            )

        # Step 2: Rotate
        result = await self._refresh_token_ledger.rotate(
            cmd.refresh_token, client_ip=cmd.client_ip
        )

        if isinstance(result, Failure):
            error = result.error
            # Step 3: Theft response widens to every credential of the user
            if isinstance(error, SecurityViolationError):
                revoked = await self._refresh_token_ledger.revoke_all_for_user(
                    error.user_id, client_ip=cmd.client_ip, reason=REASON_REUSE_DETECTED
                )
                closed = await self._session_registry.close_all_for_user(error.user_id)
                self._logger.warning(
                    "refresh_rejected_security_violation",
                    user_id=str(error.user_id),
                    client_ip=cmd.client_ip,
                    revoked_tokens=error.revoked_tokens + revoked,
                    closed_sessions=closed,
                )
                return Failure(
                    error=SecurityViolationError(
                        user_id=error.user_id,
                        revoked_tokens=error.revoked_tokens + revoked,
                    )
                )
            # Step 4: Plain invalid token
            self._logger.info("refresh_rejected", reason=error.reason.value)
            return Failure(error=error)

        rotation = result.value

        # Step 5: Load owner
        user = await self._credential_store.find_by_id(rotation.user_id)
        if user is None:
            await self._refresh_token_ledger.revoke_all_for_user(
                rotation.user_id, client_ip=cmd.client_ip, reason="user not found"
            )
            self._logger.warning("refresh_rejected_unknown_user", user_id=str(rotation.user_id))
            return Failure(error=InvalidTokenError.because(TokenFailureReason.NOT_FOUND))

        # Step 6: Mint access token
        access_token = self._access_token_issuer.mint(
            user, jwt_id=rotation.jwt_id, session_id=rotation.session_id
        )

        self._logger.info("tokens_refreshed", user_id=str(user.id))

        # Step 7: Return tokens
        return Success(
            value=AuthTokens(
                access_token=access_token,
                refresh_token=rotation.refresh_token.token,
                expires_in=self._access_token_issuer.expires_in,
                session_id=rotation.session_id,
                user=UserProfile.from_user(user),
            )
        )
