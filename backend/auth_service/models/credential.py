"""Credential model: the locally owned authentication record of a principal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from auth_service.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .refresh_token import RefreshToken


class Credential(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Email + password hash of one principal.

    The ``id`` is shared with the profile record owned by the user-profile
    service. Emails are stored exactly as given (case-sensitive).

    Fields
    ------
    email : str
        Login email, unique.
    password_hash : str
        Opaque one-way hash produced by the password hasher.
    refresh_tokens : list[RefreshToken]
        Outstanding refresh tokens; deleted together with the credential.
    """

    __tablename__ = "credentials"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        back_populates="credential",
        cascade="all, delete-orphan",
    )

    __table_args__ = (UniqueConstraint("email", name="uq_credentials_email"),)

    @validates("email")
    def _check_email(self, key: str, value: str) -> str:
        """
        Reject empty or obviously malformed emails.

        :raises ValueError: If email is missing or lacks an ``@``.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Email is required.")
        if "@" not in value:
            raise ValueError("Email format looks invalid.")
        return value
