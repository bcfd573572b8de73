"""Security adapters: password hashing, token signing, random tokens."""

from authority.infrastructure.security.bcrypt_password_service import (
    BcryptPasswordService,
)
from authority.infrastructure.security.jwt_service import JWTService
from authority.infrastructure.security.secure_token_generator import (
    SecureTokenGenerator,
)

__all__ = ["BcryptPasswordService", "JWTService", "SecureTokenGenerator"]
