"""Repository package exposing persistence-layer access for the auth models.

The SQL refresh token store lives in :mod:`auth_service.repositories.refresh_token`
and is imported from there; it depends on the service ports, which in turn
load the Unit of Work that imports this package.
"""

from __future__ import annotations

from auth_service.repositories.base import BaseRepository
from auth_service.repositories.credential import CredentialRepository

__all__ = [
    "BaseRepository",
    "CredentialRepository",
]
