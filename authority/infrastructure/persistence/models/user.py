"""User database model.

Email is stored lowercase; username keeps its original casing and a
lowercased copy (username_normalized) carries the unique index, so uniqueness
is case-insensitive on every backend.
"""

from datetime import datetime

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from authority.infrastructure.persistence.base import BaseModel, UTCDateTime


class UserModel(BaseModel):
    """User table.

    Indexes:
        - ix_users_email: (email) unique
        - ix_users_username_normalized: (username_normalized) unique
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Email address (lowercase)",
    )
    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Username as entered",
    )
    username_normalized: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Lowercased username for case-insensitive uniqueness",
    )
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hash (never plaintext)",
    )
    email_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    email_confirmation_token: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Outstanding email confirmation token",
    )
    two_factor_secret: Mapped[str | None] = mapped_column(
        String(255), nullable=True, default=None
    )
    failed_login_attempts: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True, default=None
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True, default=None
    )
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, username={self.username})>"
