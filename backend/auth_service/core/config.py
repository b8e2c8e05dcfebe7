"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

REFRESH_BACKENDS: Final[frozenset[str]] = frozenset({"sql", "redis"})

# Loads .env in development (no-op when absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


class ConfigurationError(RuntimeError):
    """Raised at startup when mandatory settings are missing or invalid."""


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Parse a lifetime such as ``"15m"``, ``"7d"`` or ``3600`` into a timedelta.

    :param value: Duration literal. Bare numbers are seconds.
    :type value: str | int | float | timedelta
    :returns: Parsed duration.
    :rtype: timedelta
    :raises ConfigurationError: If the literal cannot be parsed or is not positive.
    """
    if isinstance(value, timedelta):
        parsed = value
    elif isinstance(value, int | float):
        parsed = timedelta(seconds=value)
    else:
        match = _DURATION_RE.match(str(value))
        if match is None:
            raise ConfigurationError(f"Invalid duration literal: {value!r}")
        amount, unit = match.groups()
        parsed = timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})
    if parsed <= timedelta(0):
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET: str | None
        Signing secret of the access-token domain. Mandatory.
    JWT_REFRESH_SECRET: str | None
        Signing secret of the refresh-token domain. Mandatory.
    JWT_EXPIRES_IN: str
        Access-token lifetime (``"15m"`` by default).
    JWT_REFRESH_EXPIRES_IN: str
        Refresh-token lifetime (``"7d"`` by default).
    PASSWORD_HASH_ITERATIONS: int
        PBKDF2 work factor used when hashing passwords.
    USER_SERVICE_URL: str
        Base address of the user-profile service.
    USER_SERVICE_TIMEOUT: float
        Timeout (seconds) applied to outbound profile calls.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"``.
    REDIS_URL: str | None
        Redis connection string; required when the backend is ``"redis"``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are sourced from environment variables once, at import time. The
    auth settings are then frozen into :class:`AuthSettings` by the factory.
    """

    API_BASE_PREFIX = "/api"

    # Secrets (no defaults: absence is fatal at startup)
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "15m")
    JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "7d")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    PASSWORD_HASH_ITERATIONS = int(os.getenv("PASSWORD_HASH_ITERATIONS", "600000"))

    # Collaborators
    USER_SERVICE_URL = os.getenv("USER_SERVICE_URL", "http://localhost:3002")
    USER_SERVICE_TIMEOUT = float(os.getenv("USER_SERVICE_TIMEOUT", "5"))
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./auth.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships deterministic secrets and a cheap hashing work factor.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET = "test_jwt_secret"
    JWT_REFRESH_SECRET = "test_jwt_refresh_secret"
    JWT_EXPIRES_IN = "1h"
    JWT_REFRESH_EXPIRES_IN = "7d"
    PASSWORD_HASH_ITERATIONS = 1000
    REFRESH_TOKEN_BACKEND = "sql"
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


# --------------------------------------------------------------------------- #
# Frozen auth settings (secret store accessor)
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable secrets and lifetimes for the token lifecycle.

    Built once by :func:`load_auth_settings` and passed by reference into the
    token codec and the auth service.

    :param access_secret: Access-token signing secret.
    :param access_expires: Access-token lifetime.
    :param refresh_secret: Refresh-token signing secret.
    :param refresh_expires: Refresh-token lifetime (JWT ``exp`` and stored expiry).
    :param password_hash_iterations: PBKDF2 work factor.
    :param user_service_url: Base address of the user-profile service.
    :param user_service_timeout: Outbound call timeout in seconds.
    :param refresh_token_backend: ``"sql"`` or ``"redis"``.
    :param algorithm: JWT signing algorithm.
    """

    access_secret: str
    access_expires: timedelta
    refresh_secret: str
    refresh_expires: timedelta
    password_hash_iterations: int
    user_service_url: str
    user_service_timeout: float
    refresh_token_backend: str = "sql"
    algorithm: str = "HS256"

    def __repr__(self) -> str:
        # Secrets must never show up in logs or tracebacks.
        return (
            f"AuthSettings(access_expires={self.access_expires!r}, "
            f"refresh_expires={self.refresh_expires!r}, "
            f"user_service_url={self.user_service_url!r}, "
            f"refresh_token_backend={self.refresh_token_backend!r})"
        )


def load_auth_settings(config: Mapping[str, Any]) -> AuthSettings:
    """Build :class:`AuthSettings` from a Flask config mapping.

    :param config: Mapping holding the upper-case settings of :class:`BaseConfig`.
    :type config: Mapping[str, Any]
    :returns: Frozen settings value.
    :rtype: AuthSettings
    :raises ConfigurationError: When a signing secret is missing or a value is invalid.
    """
    missing = [key for key in ("JWT_SECRET", "JWT_REFRESH_SECRET") if not config.get(key)]
    if missing:
        raise ConfigurationError(f"Missing mandatory secrets: {', '.join(missing)}")

    backend = str(config.get("REFRESH_TOKEN_BACKEND") or "sql").strip().lower()
    if backend not in REFRESH_BACKENDS:
        raise ConfigurationError(f"Unknown REFRESH_TOKEN_BACKEND: {backend!r}")

    try:
        iterations = int(config.get("PASSWORD_HASH_ITERATIONS", 600000))
        timeout = float(config.get("USER_SERVICE_TIMEOUT", 5))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc
    if iterations < 1 or timeout <= 0:
        raise ConfigurationError("Work factor and timeout must be positive.")

    return AuthSettings(
        access_secret=str(config["JWT_SECRET"]),
        access_expires=parse_duration(config.get("JWT_EXPIRES_IN", "15m")),
        refresh_secret=str(config["JWT_REFRESH_SECRET"]),
        refresh_expires=parse_duration(config.get("JWT_REFRESH_EXPIRES_IN", "7d")),
        password_hash_iterations=iterations,
        user_service_url=str(config.get("USER_SERVICE_URL") or "http://localhost:3002").rstrip("/"),
        user_service_timeout=timeout,
        refresh_token_backend=backend,
        algorithm=str(config.get("JWT_ALGORITHM") or "HS256"),
    )
