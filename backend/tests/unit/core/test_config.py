"""Unit tests for configuration parsing."""

from __future__ import annotations

from datetime import timedelta

import pytest

from auth_service.core.config import (
    ConfigurationError,
    TestingConfig,
    get_config,
    load_auth_settings,
    parse_duration,
)


def _testing_mapping(**overrides):
    mapping = {k: getattr(TestingConfig, k) for k in dir(TestingConfig) if k.isupper()}
    mapping.update(overrides)
    return mapping


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("2h", timedelta(hours=2)),
        ("30s", timedelta(seconds=30)),
        ("3600", timedelta(hours=1)),
        (90, timedelta(seconds=90)),
        (" 1D ", timedelta(days=1)),
    ],
)
def test_parse_duration(literal, expected) -> None:
    assert parse_duration(literal) == expected


@pytest.mark.parametrize("literal", ["", "soon", "15x", "0", -5, "1.5h"])
def test_parse_duration_rejects(literal) -> None:
    with pytest.raises(ConfigurationError):
        parse_duration(literal)


def test_load_auth_settings_from_testing_config() -> None:
    settings = load_auth_settings(_testing_mapping(USER_SERVICE_URL="http://users.test/"))

    assert settings.access_expires == timedelta(hours=1)
    assert settings.refresh_expires == timedelta(days=7)
    assert settings.refresh_token_backend == "sql"
    assert settings.user_service_url == "http://users.test"
    assert settings.algorithm == "HS256"


@pytest.mark.parametrize("missing", ["JWT_SECRET", "JWT_REFRESH_SECRET"])
def test_missing_secret_fails_fast(missing) -> None:
    with pytest.raises(ConfigurationError, match=missing):
        load_auth_settings(_testing_mapping(**{missing: None}))


def test_unknown_backend_fails_fast() -> None:
    with pytest.raises(ConfigurationError, match="REFRESH_TOKEN_BACKEND"):
        load_auth_settings(_testing_mapping(REFRESH_TOKEN_BACKEND="memcached"))


def test_invalid_numeric_setting() -> None:
    with pytest.raises(ConfigurationError):
        load_auth_settings(_testing_mapping(USER_SERVICE_TIMEOUT="soon"))


def test_repr_hides_secrets() -> None:
    settings = load_auth_settings(_testing_mapping())

    assert "test_jwt_secret" not in repr(settings)
    assert "test_jwt_refresh_secret" not in repr(settings)


def test_get_config_uses_app_env(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_config() is TestingConfig

    monkeypatch.setenv("APP_ENV", "nonsense")
    assert get_config().__name__ == "DevelopmentConfig"
