# auth_service/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from auth_service.core.config import AuthSettings
from auth_service.services._shared.ports import (
    TokenClaims,
    TokenCodec,
    TokenDomain,
    TokenPayload,
    TokenVerificationError,
    VerificationFailure,
)

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp", "jti", "type"]


@dataclass(frozen=True, slots=True)
class _DomainKeys:
    secret: str
    lifetime: timedelta


class PyJWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWTs via PyJWT.

    Access and refresh tokens are signed with different secrets, so a token
    of one domain never verifies in the other. The ``type`` claim is checked
    as well, which keeps the domains apart even if both secrets are equal.
    """

    def __init__(self, settings: AuthSettings) -> None:
        self._algorithm = settings.algorithm
        self._domains = {
            TokenDomain.ACCESS: _DomainKeys(settings.access_secret, settings.access_expires),
            TokenDomain.REFRESH: _DomainKeys(settings.refresh_secret, settings.refresh_expires),
        }

    def sign(self, domain: TokenDomain, claims: TokenClaims) -> str:
        keys = self._domains[domain]
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": claims.subject_id,
            "email": claims.email,
            "iat": now,
            "exp": now + keys.lifetime,
            # Distinguishes tokens minted for the same subject in the same second.
            "jti": uuid4().hex,
            "type": domain.value,
        }
        return jwt.encode(payload, keys.secret, algorithm=self._algorithm)

    def verify(self, domain: TokenDomain, token: str) -> TokenPayload:
        """
        Decode and check a token of ``domain``.

        :raises TokenVerificationError: ``EXPIRED`` for an elapsed ``exp``;
            ``MALFORMED`` for bad format, signature, claims or type;
            ``OTHER`` for anything else PyJWT reports.
        """
        keys = self._domains[domain]
        try:
            data = jwt.decode(
                token,
                keys.secret,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenVerificationError(VerificationFailure.EXPIRED, str(exc)) from exc
        except (
            jwt.DecodeError,
            jwt.InvalidSignatureError,
            jwt.MissingRequiredClaimError,
            jwt.InvalidAlgorithmError,
            jwt.ImmatureSignatureError,
            jwt.InvalidIssuedAtError,
        ) as exc:
            raise TokenVerificationError(VerificationFailure.MALFORMED, str(exc)) from exc
        except jwt.PyJWTError as exc:
            raise TokenVerificationError(VerificationFailure.OTHER, str(exc)) from exc

        if data.get("type") != domain.value:
            raise TokenVerificationError(
                VerificationFailure.MALFORMED, f"expected a {domain.value} token"
            )
        return TokenPayload(
            subject_id=str(data["sub"]),
            email=str(data["email"]),
            issued_at=datetime.fromtimestamp(int(data["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(data["exp"]), tz=UTC),
        )
