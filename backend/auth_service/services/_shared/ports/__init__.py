"""
auth_service.services._shared.ports
===================================

*Ports* (hexagonal interfaces) the auth service depends on.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec`: signing/verification in two independent domains.

- :mod:`refresh_token_repository`:
    :class:`~.RefreshTokenRepository` and its :class:`~.RefreshTokenRecord`
    read-model.

- :mod:`user_profile_client`:
    :class:`~.UserProfileClient`: outbound call creating the remote profile.

- :mod:`password_hasher`:
    :class:`~.PasswordHasher`: opaque hash/verify.

Concrete adapters live under ``auth_service.infra`` (and
``auth_service.repositories`` for the SQL store). In-memory doubles are
exported here for unit tests.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher, PlainTextPasswordHasher
from .refresh_token_repository import (
    InMemoryRefreshTokenRepository,
    RefreshTokenRecord,
    RefreshTokenRepository,
)
from .token_codec import (
    TokenClaims,
    TokenCodec,
    TokenDomain,
    TokenPayload,
    TokenVerificationError,
    VerificationFailure,
)
from .user_profile_client import (
    InMemoryUserProfileClient,
    ProfileServiceError,
    UserProfileClient,
)

__all__ = [
    "TokenCodec",
    "TokenDomain",
    "TokenClaims",
    "TokenPayload",
    "TokenVerificationError",
    "VerificationFailure",
    "RefreshTokenRepository",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenRepository",
    "UserProfileClient",
    "ProfileServiceError",
    "InMemoryUserProfileClient",
    "PasswordHasher",
    "PlainTextPasswordHasher",
]
