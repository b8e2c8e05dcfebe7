# tests/unit/infra/test_redis_refresh_token_store.py
"""
Unit tests for RedisRefreshTokenStore using fakeredis.

These tests exercise the main flows:
- create + find_by_token / find_latest_for_credential
- update in place (old token index dropped)
- delete_by_token single-winner semantics
- stale index cleanup
- key expiry follows the record expiry

They use fakeredis.FakeRedis so they run entirely in-memory.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from auth_service.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


def _future(seconds: int = 300) -> datetime:
    return _now() + timedelta(seconds=seconds)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    """Provide a RedisRefreshTokenStore backed by FakeRedis."""
    return RedisRefreshTokenStore(r=fake_redis)


def test_create_and_find_by_token(store):
    expires_at = _future(120)

    created = store.create(credential_id="cred-1", token="tok-1", expires_at=expires_at)

    found = store.find_by_token("tok-1")
    assert found is not None
    assert found.id == created.id
    assert found.credential_id == "cred-1"
    assert found.token == "tok-1"
    assert abs((found.expires_at - expires_at).total_seconds()) < 0.01
    assert store.find_by_token("unknown") is None


def test_keys_expire_with_the_record(store):
    created = store.create(credential_id="cred-ttl", token="tok-ttl", expires_at=_future(600))

    ttl = store.r.ttl(store._k(created.id))
    assert 0 < ttl <= 600
    assert 0 < store.r.ttl(store._kt("tok-ttl")) <= 600
    assert 0 < store.r.ttl(store._kc("cred-ttl")) <= 600


def test_find_latest_returns_newest(store):
    store.create(credential_id="cred-2", token="older", expires_at=_future())
    newest = store.create(credential_id="cred-2", token="newer", expires_at=_future())
    store.create(credential_id="someone-else", token="other", expires_at=_future())

    latest = store.find_latest_for_credential("cred-2")

    assert latest is not None
    assert latest.id == newest.id
    assert store.find_latest_for_credential("nobody") is None


def test_update_replaces_token_in_place(store):
    created = store.create(credential_id="cred-3", token="before", expires_at=_future(10))

    updated = store.update(created.id, token="after", expires_at=_future(900))

    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert store.find_by_token("before") is None
    found = store.find_by_token("after")
    assert found is not None and found.id == created.id
    assert store.find_latest_for_credential("cred-3").token == "after"


def test_update_missing_record(store):
    with pytest.raises(LookupError):
        store.update("missing", token="t", expires_at=_future())


def test_delete_by_token_has_a_single_winner(store):
    store.create(credential_id="cred-4", token="once", expires_at=_future())

    assert store.delete_by_token("once") is True
    assert store.delete_by_token("once") is False
    assert store.find_by_token("once") is None
    assert store.find_latest_for_credential("cred-4") is None
    assert store.r.zcard(store._kc("cred-4")) == 0


def test_delete_all_by_token_counts(store):
    store.create(credential_id="cred-5", token="bye", expires_at=_future())

    assert store.delete_all_by_token("bye") == 1
    assert store.delete_all_by_token("bye") == 0


def test_delete_by_id(store):
    created = store.create(credential_id="cred-6", token="by-id", expires_at=_future())

    assert store.delete(created.id) is True
    assert store.delete(created.id) is False
    assert store.find_by_token("by-id") is None


def test_find_latest_prunes_stale_index_entries(store):
    """
    A record whose hash vanished (expired) must be skipped and removed from
    the credential index.
    """
    kept = store.create(credential_id="cleaner", token="kept", expires_at=_future())
    stale = store.create(credential_id="cleaner", token="stale", expires_at=_future())

    store.r.delete(store._k(stale.id))

    latest = store.find_latest_for_credential("cleaner")
    assert latest is not None and latest.id == kept.id
    members = [
        member.decode() if isinstance(member, bytes | bytearray) else str(member)
        for member in store.r.zrange(store._kc("cleaner"), 0, -1)
    ]
    assert stale.id not in members


def test_token_index_pointing_to_rotated_record_is_ignored(store):
    created = store.create(credential_id="cred-7", token="first", expires_at=_future())
    # Simulate a leftover index entry for a token that the record no longer holds
    store.r.hset(store._k(created.id), "token", "second")

    assert store.find_by_token("first") is None
