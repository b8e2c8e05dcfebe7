"""RefreshToken model: persisted, rotation-eligible refresh credentials."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auth_service.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .credential import Credential


class RefreshToken(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One outstanding refresh token.

    Fields
    ------
    credential_id : str
        Owning credential (``ON DELETE CASCADE``).
    token : str
        Signed refresh token string, unique.
    expires_at : datetime
        Server-side expiry; authoritative for revocation.
    """

    __tablename__ = "refresh_tokens"

    credential_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("credentials.id", ondelete="CASCADE"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    credential: Mapped[Credential] = relationship(back_populates="refresh_tokens")

    __table_args__ = (
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        Index("ix_refresh_tokens_credential_created", "credential_id", "created_at"),
    )
