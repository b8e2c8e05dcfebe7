"""Unit tests for refresh-store selection and service assembly."""

from __future__ import annotations

from dataclasses import replace

import fakeredis
import pytest

from auth_service.core import extensions
from auth_service.core.config import ConfigurationError
from auth_service.core.services import build_auth_service, build_refresh_token_repository
from auth_service.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from auth_service.repositories.refresh_token import SQLAlchemyRefreshTokenRepository


def test_sql_backend_is_the_default(settings) -> None:
    store = build_refresh_token_repository(settings)

    assert isinstance(store, SQLAlchemyRefreshTokenRepository)


def test_redis_backend_uses_the_shared_client(settings, monkeypatch) -> None:
    client = fakeredis.FakeRedis()
    monkeypatch.setattr(extensions, "redis_client", client)

    store = build_refresh_token_repository(replace(settings, refresh_token_backend="redis"))

    assert isinstance(store, RedisRefreshTokenStore)
    assert store.r is client


def test_redis_backend_without_client_fails_fast(settings, monkeypatch) -> None:
    monkeypatch.setattr(extensions, "redis_client", None)

    with pytest.raises(ConfigurationError, match="REDIS_URL"):
        build_refresh_token_repository(replace(settings, refresh_token_backend="redis"))


def test_build_auth_service_keeps_injected_collaborators(settings, profile_client) -> None:
    service = build_auth_service(settings, profile_client=profile_client)

    assert service.profiles is profile_client
    assert service.settings is settings
