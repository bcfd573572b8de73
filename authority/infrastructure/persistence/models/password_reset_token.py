"""Password reset token database model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from authority.infrastructure.persistence.base import BaseModel, UTCDateTime


class PasswordResetTokenModel(BaseModel):
    """Password reset token table.

    Indexes:
        - ix_password_reset_tokens_token: (token) unique
        - idx_password_reset_tokens_user_used: (user_id, is_used)
    """

    __tablename__ = "password_reset_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque token value sent by email",
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    used_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("idx_password_reset_tokens_user_used", "user_id", "is_used"),
    )
