"""Refresh token database model.

Rotation chains are flat: every row carries the id of its chain's root
(chain_id, indexed) and, once rotated, the successor's token value
(replaced_by_token). Revoking a chain is one indexed UPDATE.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from authority.infrastructure.persistence.base import BaseModel, UTCDateTime


class RefreshTokenModel(BaseModel):
    """Refresh token table.

    Indexes:
        - ix_refresh_tokens_token: (token) unique
        - ix_refresh_tokens_user_id: (user_id)
        - ix_refresh_tokens_chain_id: (chain_id)
        - ix_refresh_tokens_session_id: (session_id)
        - idx_refresh_tokens_user_state: (user_id, is_revoked, is_used)
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this refresh token",
    )
    token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque token value presented by the client",
    )
    jwt_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="jti of the access token issued alongside",
    )
    chain_id: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="Id of the root token of the rotation chain",
    )
    session_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Public id of the session the chain belongs to",
    )
    expires_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        index=True,
    )
    created_by_ip: Mapped[str | None] = mapped_column(String(45), nullable=True)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    revoked_by_ip: Mapped[str | None] = mapped_column(String(45), nullable=True)
    revoked_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)
    replaced_by_token: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Successor token value (forward pointer in the chain)",
    )

    __table_args__ = (
        Index("idx_refresh_tokens_user_state", "user_id", "is_revoked", "is_used"),
    )

    def __repr__(self) -> str:
        return (
            f"<RefreshTokenModel("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"expires_at={self.expires_at}, "
            f"revoked={self.is_revoked}"
            f")>"
        )
