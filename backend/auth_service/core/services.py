"""Build the auth service and its adapters once per application."""

from __future__ import annotations

from flask import Flask, current_app

from auth_service.core.config import AuthSettings, ConfigurationError, load_auth_settings
from auth_service.services._shared.ports import RefreshTokenRepository, UserProfileClient
from auth_service.services.auth.service import AuthService

EXTENSION_KEY = "auth_service"


def build_refresh_token_repository(settings: AuthSettings) -> RefreshTokenRepository:
    """Return the refresh token store selected by ``REFRESH_TOKEN_BACKEND``.

    :raises ConfigurationError: When the Redis backend is selected without ``REDIS_URL``.
    """
    if settings.refresh_token_backend == "redis":
        from auth_service.core import extensions
        from auth_service.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        if extensions.redis_client is None:
            raise ConfigurationError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL.")
        return RedisRefreshTokenStore(extensions.redis_client)

    from auth_service.repositories.refresh_token import SQLAlchemyRefreshTokenRepository

    return SQLAlchemyRefreshTokenRepository()


def build_auth_service(
    settings: AuthSettings,
    *,
    refresh_tokens: RefreshTokenRepository | None = None,
    profile_client: UserProfileClient | None = None,
) -> AuthService:
    """Assemble :class:`AuthService` with production adapters unless overridden."""
    from auth_service.infra.http.user_profile_client import HTTPUserProfileClient
    from auth_service.infra.jwt.pyjwt_token_codec import PyJWTTokenCodec
    from auth_service.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher

    return AuthService(
        settings=settings,
        token_codec=PyJWTTokenCodec(settings),
        refresh_tokens=refresh_tokens or build_refresh_token_repository(settings),
        password_hasher=WerkzeugPasswordHasher(settings.password_hash_iterations),
        profile_client=profile_client
        or HTTPUserProfileClient(
            settings.user_service_url, timeout=settings.user_service_timeout
        ),
    )


def init_app(app: Flask) -> None:
    """Freeze the auth settings and register the service on ``app.extensions``.

    Must run after :func:`auth_service.core.extensions.init_app` so the Redis
    client exists when selected.

    :raises ConfigurationError: On missing secrets or an unusable backend.
    """
    settings = load_auth_settings(app.config)
    app.extensions["auth_settings"] = settings
    app.extensions[EXTENSION_KEY] = build_auth_service(settings)


def get_auth_service() -> AuthService:
    """Return the service bound to the current application."""
    service = current_app.extensions.get(EXTENSION_KEY)
    if service is None:
        raise RuntimeError("AuthService is not initialized. Call core.services.init_app first.")
    return service
