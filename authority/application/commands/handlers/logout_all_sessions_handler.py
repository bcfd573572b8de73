"""Logout All Sessions handler.

Revokes every refresh token of the user and closes every session. Returns the
number of sessions closed; calling it again simply closes zero.
"""

from authority.application.commands.auth_commands import LogoutAllSessions
from authority.application.services import RefreshTokenLedger, SessionRegistry
from authority.core.constants import REASON_LOGOUT_ALL
from authority.core.result import Result, Success
from authority.domain.protocols import LoggerProtocol


class LogoutAllSessionsHandler:
    """Handler for logout-all command."""

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

    async def handle(self, cmd: LogoutAllSessions) -> Result[int, None]:
        revoked = await self._refresh_token_ledger.revoke_all_for_user(
            cmd.user_id, client_ip=cmd.client_ip, reason=REASON_LOGOUT_ALL
        )
        closed = await self._session_registry.close_all_for_user(cmd.user_id)
        self._logger.info(
            "logout_all_succeeded",
            user_id=str(cmd.user_id),
            revoked_tokens=revoked,
            closed_sessions=closed,
        )
        return Success(value=closed)
