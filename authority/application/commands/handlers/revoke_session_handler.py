"""Revoke Session handler.

Closes one session of the caller and revokes the refresh tokens bound to it.
A missing session and another user's session produce the same NotFoundError,
so session ids cannot be guessed at.
"""

from authority.application.commands.session_commands import RevokeSession
from authority.application.services import RefreshTokenLedger, SessionRegistry
from authority.core.constants import REASON_SESSION_REVOKED
from authority.core.enums import ErrorCode
from authority.core.errors import NotFoundError
from authority.core.result import Failure, Result, Success
from authority.domain.protocols import LoggerProtocol


class RevokeSessionHandler:
    """Handler for revoke session command."""

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

    async def handle(self, cmd: RevokeSession) -> Result[None, NotFoundError]:
        session = await self._session_registry.get(cmd.session_id)
        if session is None or session.user_id != cmd.user_id:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session not found",
                    resource_type="Session",
                    resource_id=cmd.session_id,
                )
            )

        await self._session_registry.close(session.session_id)
        revoked = await self._refresh_token_ledger.revoke_by_session(
            session.session_id, client_ip=cmd.client_ip, reason=REASON_SESSION_REVOKED
        )
        self._logger.info(
            "session_revoked", user_id=str(cmd.user_id), revoked_tokens=revoked
        )
        return Success(value=None)
