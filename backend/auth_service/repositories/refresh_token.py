"""SQLAlchemy adapter of the refresh token repository port."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select

from auth_service.models.base import as_utc
from auth_service.models.refresh_token import RefreshToken
from auth_service.repositories.base import BaseRepository
from auth_service.services._shared.ports import RefreshTokenRecord, RefreshTokenRepository


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        credential_id=row.credential_id,
        token=row.token,
        expires_at=as_utc(row.expires_at),
        created_at=as_utc(row.created_at),
    )


class SQLAlchemyRefreshTokenRepository(BaseRepository[RefreshToken], RefreshTokenRepository):
    """Refresh tokens stored in the ``refresh_tokens`` table.

    Runs on the Flask-scoped session, so writes become durable when the
    enclosing Unit of Work commits.
    """

    model = RefreshToken

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        row = self.session.execute(
            select(RefreshToken).where(RefreshToken.token == token)
        ).scalars().first()
        return _to_record(row) if row is not None else None

    def find_latest_for_credential(self, credential_id: str) -> RefreshTokenRecord | None:
        """Return the most recently created token of ``credential_id``.

        Ties on ``created_at`` are broken by id to keep the choice stable.
        """
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.credential_id == credential_id)
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).scalars().first()
        return _to_record(row) if row is not None else None

    def create(
        self, *, credential_id: str, token: str, expires_at: datetime
    ) -> RefreshTokenRecord:
        row = self.add(
            RefreshToken(credential_id=credential_id, token=token, expires_at=expires_at)
        )
        return _to_record(row)

    def update(self, record_id: str, *, token: str, expires_at: datetime) -> RefreshTokenRecord:
        """Replace token and expiry in place.

        :raises LookupError: If the record no longer exists.
        """
        row = self.get(record_id)
        if row is None:
            raise LookupError(f"Refresh token {record_id} not found.")
        row.token = token
        row.expires_at = expires_at
        self.flush()
        return _to_record(row)

    def delete(self, record_id: str) -> bool:  # type: ignore[override]
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.id == record_id))
        return bool(result.rowcount)

    def delete_by_token(self, token: str) -> bool:
        """Remove the record holding ``token`` with a single ``DELETE``.

        The row count decides the winner among concurrent redemptions.
        """
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.token == token))
        return bool(result.rowcount)

    def delete_all_by_token(self, token: str) -> int:
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.token == token))
        return int(result.rowcount or 0)
