from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from auth_service.services._shared.ports import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """PBKDF2-SHA256 hashing via Werkzeug; the iteration count is the work factor."""

    def __init__(self, iterations: int) -> None:
        if iterations < 1:
            raise ValueError("iterations must be positive")
        self._method = f"pbkdf2:sha256:{iterations}"

    def hash(self, raw: str) -> str:
        return generate_password_hash(raw, method=self._method)

    def verify(self, hashed: str, raw: str) -> bool:
        return check_password_hash(hashed, raw)
