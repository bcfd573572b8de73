"""Access token signing protocol for domain layer.

Access tokens are short-lived signed claim-sets. The package decides which
claims go in and when they expire; the adapter only signs and verifies.

Architecture:
    - Domain defines protocol (port) and the claim-set dataclass
    - Infrastructure implements adapter (JWTService)

Reference claims:
    sub, username, email, display_name, email_confirmed, session_id, jti,
    iat, exp, token_type="access", iss, aud, roles (opaque, not evaluated)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from uuid import UUID

from authority.core.result import Result


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessTokenClaims:
    """Claims carried by an access token.

    Attributes:
        user_id: Subject.
        username: Username at issuance.
        email: Email at issuance.
        display_name: Display name at issuance.
        email_confirmed: Whether the email was confirmed at issuance.
        jwt_id: Unique token id (jti); recorded on the paired refresh token.
        issued_at: Issuance time.
        expires_at: Expiry; now >= expires_at means expired.
        session_id: Session the token was minted for, if any.
        roles: Opaque role claims (stored, never evaluated here).
    """

    user_id: UUID
    username: str
    email: str
    display_name: str
    jwt_id: str
    issued_at: datetime
    expires_at: datetime
    email_confirmed: bool = False
    session_id: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)


class TokenGenerationProtocol(Protocol):
    """Access token signing and verification interface.

    Usage:
        token = signer.generate_access_token(claims)

        match signer.validate_access_token(token):
            case Success(value=claims):
                user_id = claims.user_id
            case Failure(error=reason):
                ...  # TokenFailureReason.EXPIRED / MALFORMED
    """

    def generate_access_token(self, claims: AccessTokenClaims) -> str:
        """Sign the claims into a compact token string."""
        ...

    def validate_access_token(self, token: str) -> Result[AccessTokenClaims, str]:
        """Verify signature, issuer, audience and expiry (zero tolerance).

        Returns:
            Success with the decoded claims, or Failure with a
            TokenFailureReason value ("expired" or "malformed").
        """
        ...
