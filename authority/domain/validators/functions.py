"""Centralized validation functions.

All validation logic defined once and reused through the Annotated types in
`authority.domain.types`. Validators are pure functions that raise ValueError
on failure, which pydantic reports as a validation error.
"""

import re

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'


def validate_email(v: str) -> str:
    """Validate email format.

    Args:
        v: Email address to validate.

    Returns:
        Normalized email (lowercase, surrounding whitespace stripped).

    Raises:
        ValueError: If email format is invalid.

    Example:
        >>> validate_email("User@Example.COM")
        'user@example.com'
    """
    v = v.strip()
    if not _EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email format")
    return v.lower()


def validate_username(v: str) -> str:
    """Validate username characters.

    Usernames may not contain '@' so that a login identifier can be routed to
    the email or the username lookup unambiguously.

    Raises:
        ValueError: If the username contains other characters than letters,
            digits, '_', '.' or '-'.
    """
    if not _USERNAME_PATTERN.match(v):
        raise ValueError(
            "Username may only contain letters, digits, '_', '.' and '-'"
        )
    return v


def validate_display_name(v: str) -> str:
    """Strip surrounding whitespace and reject blank display names."""
    v = v.strip()
    if not v:
        raise ValueError("Display name cannot be blank")
    return v


def validate_strong_password(v: str) -> str:
    """Validate password strength.

    Args:
        v: Password to validate.

    Returns:
        Password unchanged (validation only).

    Raises:
        ValueError: If password doesn't meet requirements.

    Example:
        >>> validate_strong_password("SecurePass123!")
        'SecurePass123!'
        >>> validate_strong_password("weak")
        ValueError: Password must be at least 8 characters
    """
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain uppercase letter")
    if not any(c.islower() for c in v):
        raise ValueError("Password must contain lowercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain digit")
    if not any(c in _SPECIAL_CHARACTERS for c in v):
        raise ValueError("Password must contain special character")
    return v
