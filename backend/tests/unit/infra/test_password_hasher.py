"""Unit tests for the Werkzeug-backed password hasher."""

from __future__ import annotations

import pytest

from auth_service.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher


def test_hash_is_opaque_and_verifiable() -> None:
    hasher = WerkzeugPasswordHasher(iterations=1000)

    hashed = hasher.hash("correct horse")

    assert hashed != "correct horse"
    assert hashed.startswith("pbkdf2:sha256:1000$")
    assert hasher.verify(hashed, "correct horse") is True
    assert hasher.verify(hashed, "battery staple") is False


def test_hashes_are_salted() -> None:
    hasher = WerkzeugPasswordHasher(iterations=1000)

    assert hasher.hash("same") != hasher.hash("same")


def test_rejects_non_positive_work_factor() -> None:
    with pytest.raises(ValueError):
        WerkzeugPasswordHasher(iterations=0)
