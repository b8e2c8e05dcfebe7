# auth_service/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from auth_service.services._shared.errors import ErrorKind, ServiceError
from auth_service.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize the conversion of infrastructure failures into
      :class:`ServiceError`.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    @contextmanager
    def classify_failures(
        self, message: str, kind: ErrorKind = ErrorKind.INTERNAL
    ) -> Iterator[None]:
        """
        Re-raise unexpected exceptions as a :class:`ServiceError`.

        ``ServiceError`` instances pass through unchanged; anything else is
        logged with its traceback and wrapped, keeping the original as
        ``cause``.

        :param message: Client-safe message for wrapped failures.
        :param kind: Classification for wrapped failures.
        """
        try:
            yield
        except ServiceError:
            raise
        except Exception as exc:
            log.error("%s: %s", message, exc.__class__.__name__, exc_info=exc)
            raise ServiceError(kind, message, cause=exc) from exc

    # --------------------------- Clock --------------------------------------

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
