"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from .auth import (
    CredentialSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    TokenPayloadSchema,
)

__all__ = [
    "RegisterSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "TokenPairSchema",
    "TokenPayloadSchema",
    "CredentialSchema",
]
