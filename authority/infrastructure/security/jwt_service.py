"""JWT access token service (adapter).

Implements TokenGenerationProtocol using PyJWT with HMAC-SHA256.

Security:
    - HS256 with a secret of at least 256 bits
    - Issuer and audience written and required
    - Expiry checked against the injected clock with zero leeway:
      a token is expired from the exact instant now >= exp
    - Unique jti per token, recorded on the paired refresh token

PyJWT's own time checks use the wall clock, so exp/iat verification is
disabled in jwt.decode and exp is compared against the injected clock
instead.
"""

from datetime import UTC, datetime
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from authority.core.constants import ACCESS_TOKEN_TYPE_CLAIM
from authority.core.result import Failure, Result, Success
from authority.domain.errors import TokenFailureReason
from authority.domain.protocols import AccessTokenClaims, ClockProtocol

_REQUIRED_CLAIMS = ["sub", "exp", "iat", "jti", "iss", "aud"]


class JWTService:
    """JWT access token generation and validation service.

    Usage:
        token_service = JWTService(
            secret_key=settings.secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            clock=clock,
        )
        token = token_service.generate_access_token(claims)
        result = token_service.validate_access_token(token)
    """

    def __init__(
        self,
        secret_key: str,
        *,
        issuer: str,
        audience: str,
        clock: ClockProtocol,
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Raises:
            ValueError: If secret_key is shorter than 32 bytes.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience
        self._clock = clock
        self._algorithm = algorithm

    def generate_access_token(self, claims: AccessTokenClaims) -> str:
        """Sign access token claims.

        Returns:
            JWT string (header.payload.signature).
        """
        payload: dict[str, object] = {
            "sub": str(claims.user_id),
            "username": claims.username,
            "email": claims.email,
            "display_name": claims.display_name,
            "email_confirmed": claims.email_confirmed,
            "token_type": ACCESS_TOKEN_TYPE_CLAIM,
            "jti": claims.jwt_id,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
            "iss": self._issuer,
            "aud": self._audience,
        }
        if claims.session_id is not None:
            payload["session_id"] = claims.session_id
        if claims.roles:
            payload["roles"] = list(claims.roles)

        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token

    def validate_access_token(self, token: str) -> Result[AccessTokenClaims, str]:
        """Validate a JWT access token and decode its claims.

        Returns:
            Success(AccessTokenClaims), or Failure with "expired" or
            "malformed" (TokenFailureReason values). Never raises.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except InvalidTokenError:
            return Failure(error=TokenFailureReason.MALFORMED.value)

        if payload.get("token_type") != ACCESS_TOKEN_TYPE_CLAIM:
            return Failure(error=TokenFailureReason.MALFORMED.value)

        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
            claims = AccessTokenClaims(
                user_id=UUID(str(payload["sub"])),
                username=str(payload.get("username", "")),
                email=str(payload.get("email", "")),
                display_name=str(payload.get("display_name", "")),
                email_confirmed=bool(payload.get("email_confirmed", False)),
                jwt_id=str(payload["jti"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=expires_at,
                session_id=payload.get("session_id"),
                roles=tuple(payload.get("roles", ())),
            )
        except (TypeError, ValueError):
            return Failure(error=TokenFailureReason.MALFORMED.value)

        if self._clock.now() >= expires_at:
            return Failure(error=TokenFailureReason.EXPIRED.value)

        return Success(value=claims)
