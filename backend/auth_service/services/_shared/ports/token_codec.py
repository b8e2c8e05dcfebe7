from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Protocol


class TokenDomain(Enum):
    """Signing domain; each has its own secret and lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


class VerificationFailure(Enum):
    MALFORMED = auto()
    EXPIRED = auto()
    OTHER = auto()


class TokenVerificationError(Exception):
    """
    Raised by :meth:`TokenCodec.verify`.

    :param reason: Failure classification.
    :type reason: VerificationFailure
    """

    def __init__(self, reason: VerificationFailure, message: str = "") -> None:
        super().__init__(message or reason.name.lower())
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Business claims embedded in every token."""

    subject_id: str
    email: str


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Verified token content."""

    subject_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """Port for signing and verifying self-contained tokens."""

    def sign(self, domain: TokenDomain, claims: TokenClaims) -> str: ...

    def verify(self, domain: TokenDomain, token: str) -> TokenPayload:
        """
        Check signature, expiry and token type.

        :raises TokenVerificationError: On any failure.
        """
        ...
