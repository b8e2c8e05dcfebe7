"""Factory Boy definition for :class:`auth_service.models.credential.Credential`."""

from __future__ import annotations

from uuid import uuid4

import factory
from werkzeug.security import generate_password_hash

from auth_service.models.credential import Credential
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class CredentialFactory(BaseFactory):
    """
    Build persisted credentials.

    Pass ``password=...`` to hash a specific raw password; the default is
    :data:`DEFAULT_PASSWORD`. Hashing uses a cheap work factor.
    """

    class Meta:
        model = Credential
        exclude = ("password",)

    id = factory.LazyFunction(lambda: str(uuid4()))
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password = DEFAULT_PASSWORD
    password_hash = factory.LazyAttribute(
        lambda o: generate_password_hash(o.password, method="pbkdf2:sha256:1000")
    )
