from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Opaque one-way password hashing."""

    def hash(self, raw: str) -> str: ...

    def verify(self, hashed: str, raw: str) -> bool: ...


class PlainTextPasswordHasher(PasswordHasher):
    """Reversible marker hasher for fast unit tests only."""

    def hash(self, raw: str) -> str:
        return f"plain${raw}"

    def verify(self, hashed: str, raw: str) -> bool:
        return hashed == f"plain${raw}"
