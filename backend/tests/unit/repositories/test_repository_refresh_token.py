"""
Unit tests for SQLAlchemyRefreshTokenRepository, using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from auth_service.repositories.refresh_token import SQLAlchemyRefreshTokenRepository
from tests.factories.credential import CredentialFactory
from tests.factories.refresh_token import RefreshTokenFactory


@pytest.fixture
def repo(session) -> SQLAlchemyRefreshTokenRepository:
    return SQLAlchemyRefreshTokenRepository(session=session)


class TestSQLAlchemyRefreshTokenRepository:
    def test_create_and_find_by_token(self, repo, session):
        credential = CredentialFactory()
        expires_at = datetime.now(UTC) + timedelta(days=1)

        created = repo.create(credential_id=credential.id, token="abc", expires_at=expires_at)

        found = repo.find_by_token("abc")
        assert found is not None
        assert found.id == created.id
        assert found.credential_id == credential.id
        assert found.expires_at.tzinfo is not None
        assert repo.find_by_token("nope") is None

    def test_find_latest_for_credential(self, repo):
        credential = CredentialFactory()
        base = datetime.now(UTC)
        RefreshTokenFactory(credential=credential, created_at=base - timedelta(hours=2))
        newest = RefreshTokenFactory(credential=credential, created_at=base)
        RefreshTokenFactory(created_at=base + timedelta(hours=1))  # another credential

        latest = repo.find_latest_for_credential(credential.id)

        assert latest is not None
        assert latest.id == newest.id
        assert repo.find_latest_for_credential("unknown") is None

    def test_update_keeps_identity(self, repo):
        row = RefreshTokenFactory(token="old-token")
        new_expiry = datetime.now(UTC) + timedelta(days=3)

        updated = repo.update(row.id, token="new-token", expires_at=new_expiry)

        assert updated.id == row.id
        assert updated.token == "new-token"
        assert repo.find_by_token("old-token") is None
        assert repo.find_by_token("new-token").id == row.id

    def test_update_missing_raises(self, repo):
        with pytest.raises(LookupError):
            repo.update("missing", token="x", expires_at=datetime.now(UTC))

    def test_delete_by_token_reports_whether_it_removed(self, repo):
        RefreshTokenFactory(token="single-use")

        assert repo.delete_by_token("single-use") is True
        assert repo.delete_by_token("single-use") is False
        assert repo.find_by_token("single-use") is None

    def test_delete_all_by_token_counts_rows(self, repo):
        RefreshTokenFactory(token="logout-me")

        assert repo.delete_all_by_token("logout-me") == 1
        assert repo.delete_all_by_token("logout-me") == 0

    def test_delete_by_id(self, repo):
        row = RefreshTokenFactory()

        assert repo.delete(row.id) is True
        assert repo.delete(row.id) is False

    def test_falls_back_to_scoped_session(self, session):
        repo = SQLAlchemyRefreshTokenRepository()
        RefreshTokenFactory(token="scoped")

        assert repo.find_by_token("scoped") is not None
