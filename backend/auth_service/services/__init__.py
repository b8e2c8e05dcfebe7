"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`auth_service.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``auth_service.services._shared``)
    * :class:`BaseService`
    * :class:`ServiceError`, :class:`ErrorKind`

- Auth service (from ``auth_service.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`, :class:`TokenPairOut`, :class:`CredentialOut`
"""

from __future__ import annotations

from auth_service.services._shared.base import BaseService
from auth_service.services._shared.errors import ErrorKind, ServiceError
from auth_service.services.auth.dto import (
    CredentialOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from auth_service.services.auth.service import AuthService

__all__ = [
    "BaseService",
    "ServiceError",
    "ErrorKind",
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "TokenPairOut",
    "CredentialOut",
]
