"""Factory Boy definition for :class:`auth_service.models.refresh_token.RefreshToken`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import factory

from auth_service.models.refresh_token import RefreshToken
from tests.factories import BaseFactory
from tests.factories.credential import CredentialFactory


class RefreshTokenFactory(BaseFactory):
    """Persisted refresh token owned by a fresh credential unless one is given."""

    class Meta:
        model = RefreshToken

    credential = factory.SubFactory(CredentialFactory)
    credential_id = factory.SelfAttribute("credential.id")
    token = factory.Sequence(lambda n: f"refresh-token-{n}")
    expires_at = factory.LazyFunction(lambda: datetime.now(UTC) + timedelta(days=7))
