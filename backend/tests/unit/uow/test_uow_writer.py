"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from auth_service.models import Credential, RefreshToken
from auth_service.repositories.refresh_token import SQLAlchemyRefreshTokenRepository
from auth_service.uow import SQLAlchemyUnitOfWork
from tests.factories.credential import CredentialFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN we create a credential via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = db.session.query(Credential).count()

        with SQLAlchemyUnitOfWork() as uow:
            credential = CredentialFactory.build()  # build = no persist
            uow.credentials.add(credential)

        after = db.session.query(Credential).count()
        assert after == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = db.session.query(Credential).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.credentials.add(CredentialFactory.build())
            raise RuntimeError("boom")

        after = db.session.query(Credential).count()
        assert after == initial

    def test_refresh_repository_joins_the_transaction(self, app, db, session):
        """
        The SQL refresh token repository runs on the same scoped session, so its
        writes roll back together with the credential.
        """
        refresh_tokens = SQLAlchemyRefreshTokenRepository()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            credential = uow.credentials.create(
                credential_id="11111111-1111-4111-8111-111111111111",
                email="joined@example.com",
                password_hash="h",
            )
            refresh_tokens.create(
                credential_id=credential.id,
                token="joined-token",
                expires_at=datetime.now(UTC) + timedelta(days=1),
            )
            raise RuntimeError("boom")

        assert db.session.query(Credential).count() == 0
        assert db.session.query(RefreshToken).count() == 0
