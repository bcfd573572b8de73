"""Annotated types with centralized validation.

All custom types use pydantic's Annotated with Field constraints and
AfterValidator, so a single definition drives every place input is checked.

Usage:
    from pydantic import BaseModel
    from authority.domain.types import Email, Password

    class Registration(BaseModel):
        email: Email
        password: Password
"""

from typing import Annotated

from pydantic import AfterValidator, Field

from authority.domain.validators import (
    validate_display_name,
    validate_email,
    validate_strong_password,
    validate_username,
)

Email = Annotated[
    str,
    Field(
        min_length=5,
        max_length=255,
        description="Email address",
        examples=["user@example.com"],
    ),
    AfterValidator(validate_email),
]
"""Email address, validated and normalized to lowercase."""

Username = Annotated[
    str,
    Field(
        min_length=3,
        max_length=50,
        description="Unique username (case-insensitive)",
        examples=["jane_doe"],
    ),
    AfterValidator(validate_username),
]
"""Username: 3-50 characters of letters, digits, '_', '.' and '-'."""

DisplayName = Annotated[
    str,
    Field(
        min_length=1,
        max_length=100,
        description="Name shown to other users",
        examples=["Jane Doe"],
    ),
    AfterValidator(validate_display_name),
]

Password = Annotated[
    str,
    Field(
        min_length=8,
        max_length=128,
        description="Password with strength requirements",
        examples=["SecurePass123!"],
    ),
    AfterValidator(validate_strong_password),
]
"""Password with strength validation.

Requirements:
- At least 8 characters
- At least one uppercase letter
- At least one lowercase letter
- At least one digit
- At least one special character (!@#$%^&*(),.?":{}|<>)
"""
