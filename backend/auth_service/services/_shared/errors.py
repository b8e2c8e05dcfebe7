"""
Domain-level errors used within the service layer.

These errors are **framework-agnostic** and never import Flask or HTTP
helpers. Every failure crossing the service boundary is a
:class:`ServiceError` tagged with one :class:`ErrorKind`; the translation to
HTTP responses (RFC 7807) happens in ``auth_service/core/errors.py``.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *markers: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name (``uq_credentials_email``) while
    SQLite reports the column (``credentials.email``); pass both.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    markers : str
        Constraint names or ``table.column`` fragments to look for.

    Returns
    -------
    bool
        True if the IntegrityError message mentions any marker.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    return any(marker.lower() in message for marker in markers)


class ErrorKind(Enum):
    """Classification of service failures, valued by their HTTP status."""

    CONFLICT = 409
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL = 500


class ServiceError(Exception):
    """
    Classified service failure.

    :param kind: Failure classification.
    :type kind: ErrorKind
    :param message: Client-safe, human-readable message.
    :type message: str
    :param cause: Underlying exception kept for diagnostics only.
    :type cause: BaseException | None

    Notes
    -----
    ``message`` is what crosses the service boundary. ``cause`` is logged by
    the API layer but never rendered to clients.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    @property
    def status_code(self) -> int:
        return self.kind.value

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.name}, message={self.message!r})"

    # ---- constructors ----------------------------------------------------

    @classmethod
    def conflict(cls, message: str, *, cause: BaseException | None = None) -> ServiceError:
        return cls(ErrorKind.CONFLICT, message, cause=cause)

    @classmethod
    def unauthorized(cls, message: str, *, cause: BaseException | None = None) -> ServiceError:
        return cls(ErrorKind.UNAUTHORIZED, message, cause=cause)

    @classmethod
    def not_found(cls, message: str, *, cause: BaseException | None = None) -> ServiceError:
        return cls(ErrorKind.NOT_FOUND, message, cause=cause)

    @classmethod
    def internal(cls, message: str, *, cause: BaseException | None = None) -> ServiceError:
        return cls(ErrorKind.INTERNAL, message, cause=cause)
