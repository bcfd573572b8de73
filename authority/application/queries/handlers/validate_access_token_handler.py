"""Validate Access Token handler.

Flow:
1. Verify signature, issuer, audience and expiry (zero tolerance)
2. If the token names a session, the session must still be valid;
   logging out, revoking the session or a theft response therefore cut off
   outstanding access tokens too
3. Touch the session (activity tracking)
4. Return Success(TokenValidation)
"""

from authority.application.dtos import TokenValidation
from authority.application.queries.auth_queries import ValidateAccessToken
from authority.application.services import SessionRegistry
from authority.core.result import Failure, Result, Success
from authority.domain.errors import InvalidTokenError, TokenFailureReason
from authority.domain.protocols import LoggerProtocol, TokenGenerationProtocol


class ValidateAccessTokenHandler:
    """Handler for access token validation."""

    def __init__(
        self,
        *,
        token_service: TokenGenerationProtocol,
        session_registry: SessionRegistry,
        logger: LoggerProtocol,
    ) -> None:
        self._token_service = token_service
        self._session_registry = session_registry
        self._logger = logger

    async def handle(
        self, query: ValidateAccessToken
    ) -> Result[TokenValidation, InvalidTokenError]:
        # Step 1: Verify token
        verified = self._token_service.validate_access_token(query.access_token)
        if isinstance(verified, Failure):
            reason = TokenFailureReason(verified.error)
            self._logger.debug("access_token_rejected", reason=reason.value)
            return Failure(error=InvalidTokenError.because(reason))
        claims = verified.value

        # Steps 2-3: Session must be alive; record activity
        if claims.session_id is not None:
            if not await self._session_registry.touch(claims.session_id):
                self._logger.debug(
                    "access_token_rejected",
                    reason=TokenFailureReason.SESSION_ENDED.value,
                    user_id=str(claims.user_id),
                )
                return Failure(
                    error=InvalidTokenError.because(TokenFailureReason.SESSION_ENDED)
                )

        # Step 4: Return identity
        return Success(
            value=TokenValidation(
                user_id=claims.user_id,
                username=claims.username,
                email=claims.email,
                jwt_id=claims.jwt_id,
                expires_at=claims.expires_at,
                session_id=claims.session_id,
            )
        )
