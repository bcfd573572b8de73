"""Logout User handler.

Flow:
1. No refresh token presented: nothing to revoke (access-token-only logout)
2. Look up the refresh token; unknown tokens and tokens of other users are
   ignored
3. Revoke its whole rotation chain (a stale token still ends its live
   successor) and close its session
4. Return Success

Logout always succeeds. The access token stays verifiable until it expires,
but validation rejects it once its session is closed.
"""

from authority.application.commands.auth_commands import LogoutUser
from authority.application.services import RefreshTokenLedger, SessionRegistry
from authority.core.constants import REASON_LOGOUT
from authority.core.result import Result, Success
from authority.domain.protocols import LoggerProtocol


class LogoutUserHandler:
    """Handler for logout command."""

    def __init__(
        self,
        *,
        session_registry: SessionRegistry,
        refresh_token_ledger: RefreshTokenLedger,
        logger: LoggerProtocol,
    ) -> None:
        self._session_registry = session_registry
        self._refresh_token_ledger = refresh_token_ledger
        self._logger = logger

    async def handle(self, cmd: LogoutUser) -> Result[None, None]:
        # Step 1: Nothing presented
        if cmd.refresh_token is None:
            self._logger.info("logout_without_refresh_token", user_id=str(cmd.user_id))
            return Success(value=None)

        # Step 2: Ownership check
        token = await self._refresh_token_ledger.find(cmd.refresh_token)
        if token is None or token.user_id != cmd.user_id:
            self._logger.info(
                "logout_token_ignored",
                user_id=str(cmd.user_id),
                reason="not_found" if token is None else "not_owned",
            )
            return Success(value=None)

        # Step 3: Revoke the token's chain and close its session
        await self._refresh_token_ledger.revoke_chain(
            token.chain_id, client_ip=cmd.client_ip, reason=REASON_LOGOUT
        )
        if token.session_id is not None:
            await self._session_registry.close(token.session_id)

        self._logger.info(
            "logout_succeeded", user_id=str(cmd.user_id), session_id=token.session_id
        )

        # Step 4: Return Success
        return Success(value=None)
