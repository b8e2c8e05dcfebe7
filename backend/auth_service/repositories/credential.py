"""Credential repository: persistence of email + password hash records."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from auth_service.models.credential import Credential
from auth_service.repositories.base import BaseRepository


class CredentialRepository(BaseRepository[Credential]):
    """Persistence-only repository for :class:`Credential`.

    Emails are matched exactly; no case folding or trimming is applied.
    It NEVER hashes passwords or issues tokens.
    """

    model = Credential

    def get_by_email(self, email: str) -> Credential | None:
        """Fetch a credential by email.

        :param email: Email address, compared verbatim.
        :type email: str
        :returns: Credential or ``None`` when not found.
        :rtype: Credential | None
        """
        stmt = select(Credential).where(Credential.email == email)
        return cast(Credential | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(Credential.id).where(Credential.email == email)
        return self.session.execute(stmt).first() is not None

    def exists_by_id(self, credential_id: str) -> bool:
        stmt = select(Credential.id).where(Credential.id == credential_id)
        return self.session.execute(stmt).first() is not None

    def create(self, *, credential_id: str, email: str, password_hash: str) -> Credential:
        """Insert a credential and flush.

        :raises sqlalchemy.exc.IntegrityError: When the email is already taken.
        """
        return self.add(Credential(id=credential_id, email=email, password_hash=password_hash))

    def delete_by_id(self, credential_id: str) -> bool:
        """Delete a credential (and, via ORM cascade, its refresh tokens).

        :returns: ``True`` if a credential was deleted.
        :rtype: bool
        """
        credential = self.get(credential_id)
        if credential is None:
            return False
        self.delete(credential)
        return True
