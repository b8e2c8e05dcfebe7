# comments in English; reST docstrings
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

import redis  # type: ignore[import-untyped]

from auth_service.services._shared.ports import RefreshTokenRecord, RefreshTokenRepository


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenRepository):
    """
    Redis-backed refresh token repository.

    Layout
    ------
    ``rt:{id}``
        Hash with ``credential_id``, ``token``, ``expires_at`` and
        ``created_at`` (float epoch seconds).
    ``rt:t:{sha256(token)}``
        Token index holding the record id. Redemption consumes it with
        ``GETDEL``, so exactly one caller wins.
    ``rt:c:{credential_id}``
        Sorted set of record ids scored by ``created_at``.

    Every key expires together with its record. Index entries whose hash is
    gone are pruned on read. Records are not removed when a credential is
    deleted; redeeming them fails because the owner no longer exists.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(record_id: str) -> str:
        return f"rt:{record_id}"

    @staticmethod
    def _kt(token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"rt:t:{digest}"

    @staticmethod
    def _kc(credential_id: str) -> str:
        return f"rt:c:{credential_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> float:
        # naive -> label as UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.timestamp()

    def _ttl(self, expires_at: datetime) -> int:
        return max(1, int(self._to_ts(expires_at) - datetime.now(UTC).timestamp()))

    @staticmethod
    def _s(value: bytes | str | None, default: str = "") -> str:
        if value is None:
            return default
        return value.decode() if isinstance(value, bytes | bytearray) else str(value)

    def _load(self, record_id: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(record_id))
        if not h:
            return None
        return RefreshTokenRecord(
            id=record_id,
            credential_id=self._s(h.get(b"credential_id")),
            token=self._s(h.get(b"token")),
            expires_at=datetime.fromtimestamp(float(self._s(h.get(b"expires_at"), "0")), tz=UTC),
            created_at=datetime.fromtimestamp(float(self._s(h.get(b"created_at"), "0")), tz=UTC),
        )

    # -------------------- API ------------------------

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        record_id = self.r.get(self._kt(token))
        if record_id is None:
            return None
        record = self._load(self._s(record_id))
        if record is None or record.token != token:
            return None
        return record

    def find_latest_for_credential(self, credential_id: str) -> RefreshTokenRecord | None:
        key_c = self._kc(credential_id)
        stale: list[str] = []
        found: RefreshTokenRecord | None = None
        for member in self.r.zrevrange(key_c, 0, -1):
            record_id = self._s(member)
            record = self._load(record_id)
            if record is None:
                # Underlying hash expired or deleted -> mark for cleanup
                stale.append(record_id)
                continue
            found = record
            break
        if stale:
            self.r.zrem(key_c, *stale)
        return found

    def create(
        self, *, credential_id: str, token: str, expires_at: datetime
    ) -> RefreshTokenRecord:
        record_id = str(uuid4())
        created_at = datetime.now(UTC)
        ttl = self._ttl(expires_at)

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            self._k(record_id),
            mapping={
                "credential_id": credential_id,
                "token": token,
                "expires_at": str(self._to_ts(expires_at)),
                "created_at": str(self._to_ts(created_at)),
            },
        )
        pipe.expire(self._k(record_id), ttl)
        pipe.set(self._kt(token), record_id, ex=ttl)
        pipe.zadd(self._kc(credential_id), {record_id: self._to_ts(created_at)})
        pipe.expire(self._kc(credential_id), ttl)
        pipe.execute()

        return RefreshTokenRecord(
            id=record_id,
            credential_id=credential_id,
            token=token,
            expires_at=expires_at,
            created_at=created_at,
        )

    def update(self, record_id: str, *, token: str, expires_at: datetime) -> RefreshTokenRecord:
        """Replace token and expiry of ``record_id``.

        :raises LookupError: If the record no longer exists.
        """
        current = self._load(record_id)
        if current is None:
            raise LookupError(f"Refresh token {record_id} not found.")
        ttl = self._ttl(expires_at)
        key_c = self._kc(current.credential_id)

        pipe = self.r.pipeline(transaction=True)
        pipe.delete(self._kt(current.token))
        pipe.hset(
            self._k(record_id),
            mapping={"token": token, "expires_at": str(self._to_ts(expires_at))},
        )
        pipe.expire(self._k(record_id), ttl)
        pipe.set(self._kt(token), record_id, ex=ttl)
        pipe.zadd(key_c, {record_id: self._to_ts(current.created_at)})
        pipe.expire(key_c, ttl)
        pipe.execute()

        return RefreshTokenRecord(
            id=record_id,
            credential_id=current.credential_id,
            token=token,
            expires_at=expires_at,
            created_at=current.created_at,
        )

    def delete(self, record_id: str) -> bool:
        current = self._load(record_id)
        if current is None:
            return False
        pipe = self.r.pipeline(transaction=True)
        pipe.delete(self._k(record_id))
        pipe.delete(self._kt(current.token))
        pipe.zrem(self._kc(current.credential_id), record_id)
        out = pipe.execute()
        return bool(out[0])

    def delete_by_token(self, token: str) -> bool:
        """Consume the token index atomically, then drop the record.

        Only the caller whose ``GETDEL`` returns the id proceeds.
        """
        record_id = self.r.getdel(self._kt(token))
        if record_id is None:
            return False
        rid = self._s(record_id)
        credential_id = self.r.hget(self._k(rid), "credential_id")

        pipe = self.r.pipeline(transaction=True)
        pipe.delete(self._k(rid))
        if credential_id is not None:
            pipe.zrem(self._kc(self._s(credential_id)), rid)
        pipe.execute()
        return True

    def delete_all_by_token(self, token: str) -> int:
        # The token index is unique, so at most one record holds ``token``.
        return 1 if self.delete_by_token(token) else 0
