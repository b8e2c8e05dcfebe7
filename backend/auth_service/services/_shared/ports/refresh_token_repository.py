from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for a persisted refresh token.

    :ivar id: Record identifier, stable across in-place replacement.
    :ivar credential_id: Owning credential id.
    :ivar token: Signed refresh token string.
    :ivar expires_at: Server-side expiry (UTC, timezone-aware).
    :ivar created_at: Creation instant (UTC); defines "latest".
    """

    id: str
    credential_id: str
    token: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class RefreshTokenRepository(Protocol):
    """
    Storage of outstanding refresh tokens.

    ``delete_by_token`` MUST be atomic: among concurrent callers holding the
    same token exactly one observes ``True``.
    """

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        """Return the record holding ``token`` (if any)."""

    def find_latest_for_credential(self, credential_id: str) -> RefreshTokenRecord | None:
        """Return the most recently created record for the credential."""

    def create(
        self, *, credential_id: str, token: str, expires_at: datetime
    ) -> RefreshTokenRecord:
        """Persist a new record and return it."""

    def update(self, record_id: str, *, token: str, expires_at: datetime) -> RefreshTokenRecord:
        """Replace token and expiry of an existing record, keeping its id."""

    def delete(self, record_id: str) -> bool:
        """Delete one record by id. :returns: True if it existed."""

    def delete_by_token(self, token: str) -> bool:
        """Atomically remove the record holding ``token``. :returns: True if removed."""

    def delete_all_by_token(self, token: str) -> int:
        """Remove every record holding ``token``. :returns: Number removed."""


class InMemoryRefreshTokenRepository(RefreshTokenRepository):
    """
    Dict-backed refresh token repository.

    .. note::
       Uses a threading lock to simulate atomicity in unit tests.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            return next((r for r in self._by_id.values() if r.token == token), None)

    def find_latest_for_credential(self, credential_id: str) -> RefreshTokenRecord | None:
        with self._lock:
            owned = [r for r in self._by_id.values() if r.credential_id == credential_id]
        if not owned:
            return None
        return max(owned, key=lambda r: r.created_at)

    def create(
        self, *, credential_id: str, token: str, expires_at: datetime
    ) -> RefreshTokenRecord:
        record = RefreshTokenRecord(
            id=str(uuid4()),
            credential_id=credential_id,
            token=token,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        with self._lock:
            self._by_id[record.id] = record
        return record

    def update(self, record_id: str, *, token: str, expires_at: datetime) -> RefreshTokenRecord:
        with self._lock:
            current = self._by_id.get(record_id)
            if current is None:
                raise KeyError(record_id)
            updated = replace(current, token=token, expires_at=expires_at)
            self._by_id[record_id] = updated
            return updated

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._by_id.pop(record_id, None) is not None

    def delete_by_token(self, token: str) -> bool:
        with self._lock:
            for record_id, record in self._by_id.items():
                if record.token == token:
                    del self._by_id[record_id]
                    return True
            return False

    def delete_all_by_token(self, token: str) -> int:
        with self._lock:
            doomed = [rid for rid, r in self._by_id.items() if r.token == token]
            for rid in doomed:
                del self._by_id[rid]
            return len(doomed)

    # test helper
    def force_expiry(self, record_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_id[record_id] = replace(self._by_id[record_id], expires_at=expires_at)
