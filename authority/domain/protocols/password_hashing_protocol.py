"""Password hashing protocol for domain layer.

Architecture:
    - Domain defines protocol (port)
    - Infrastructure implements adapter (BcryptPasswordService)
    - No framework dependencies in domain
"""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Password hashing and verification interface.

    Usage:
        password_hash = hasher.hash_password("SecurePass123!")
        hasher.verify_password("SecurePass123!", password_hash)  # True
    """

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password (one-way, salted per password).

        Args:
            password: Plaintext password to hash.

        Returns:
            Hashed password string.
        """
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a hash.

        Args:
            password: Plaintext password to verify.
            password_hash: Stored hash.

        Returns:
            True if password matches hash. False otherwise, including when the
            hash is malformed (never raises).
        """
        ...
