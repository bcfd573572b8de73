"""Access token minting shared by login and refresh."""

from datetime import timedelta

from authority.domain.entities import User
from authority.domain.protocols import (
    AccessTokenClaims,
    ClockProtocol,
    TokenGenerationProtocol,
)


class AccessTokenIssuer:
    """Build access token claims for a user and sign them."""

    def __init__(
        self,
        *,
        token_service: TokenGenerationProtocol,
        clock: ClockProtocol,
        lifetime: timedelta,
    ) -> None:
        self._token_service = token_service
        self._clock = clock
        self._lifetime = lifetime

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._lifetime.total_seconds())

    def mint(self, user: User, *, jwt_id: str, session_id: str | None) -> str:
        now = self._clock.now()
        claims = AccessTokenClaims(
            user_id=user.id,
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            email_confirmed=user.email_confirmed,
            jwt_id=jwt_id,
            issued_at=now,
            expires_at=now + self._lifetime,
            session_id=session_id,
        )
        return self._token_service.generate_access_token(claims)
