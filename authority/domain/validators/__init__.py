"""Validators package exports."""

from authority.domain.validators.functions import (
    validate_display_name,
    validate_email,
    validate_strong_password,
    validate_username,
)

__all__ = [
    "validate_display_name",
    "validate_email",
    "validate_strong_password",
    "validate_username",
]
