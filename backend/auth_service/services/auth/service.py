# auth_service/services/auth/service.py
from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from auth_service.core.config import AuthSettings
from auth_service.models.base import as_utc
from auth_service.services._shared.base import BaseService
from auth_service.services._shared.errors import ErrorKind, ServiceError, violates
from auth_service.services._shared.ports import (
    PasswordHasher,
    ProfileServiceError,
    RefreshTokenRepository,
    TokenClaims,
    TokenCodec,
    TokenDomain,
    TokenPayload,
    TokenVerificationError,
    UserProfileClient,
    VerificationFailure,
)
from auth_service.services.auth.dto import (
    CredentialOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)

log = logging.getLogger(__name__)

USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
INVALID_OR_EXPIRED_REFRESH_TOKEN = "Invalid or expired refresh token"
INVALID_TOKEN = "Invalid token"
TOKEN_VALIDATION_FAILED = "Token validation failed"
USER_NOT_FOUND = "User not found"
REGISTRATION_FAILED = "Registration failed"
PROFILE_SERVICE_UNAVAILABLE = "User profile service unavailable"


class AuthService(BaseService):
    """
    Credential and token lifecycle service.

    Issues, rotates, validates and revokes access/refresh token pairs, and
    keeps the local :class:`~auth_service.models.Credential` consistent with
    the remote user profile. Registration is a two-step saga: the credential
    is committed first, then the profile is created remotely; a remote
    failure is compensated by deleting the credential.

    Refresh tokens are single-use. Redemption relies on the store's atomic
    ``delete_by_token``, so two concurrent redemptions of one token cannot
    both succeed.
    """

    def __init__(
        self,
        *,
        settings: AuthSettings,
        token_codec: TokenCodec,
        refresh_tokens: RefreshTokenRepository,
        password_hasher: PasswordHasher,
        profile_client: UserProfileClient,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param settings: Frozen auth configuration, built once at startup.
        :param token_codec: Signs/verifies tokens in the access and refresh domains.
        :param refresh_tokens: Refresh token store (SQL or Redis).
        :param password_hasher: Opaque password hashing.
        :param profile_client: Outbound client of the user-profile service.
        """
        self.settings = settings
        self.codec = token_codec
        self.refresh_tokens = refresh_tokens
        self.hasher = password_hasher
        self.profiles = profile_client

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> TokenPairOut:
        """
        Create a credential, create the remote profile, and issue tokens.

        :param dto: Registration input.
        :returns: Access/Refresh token pair.
        :raises ServiceError: ``CONFLICT`` if the email is taken,
            ``UNAUTHORIZED`` if the profile service rejects or is unreachable
            (the credential is removed again), ``INTERNAL`` otherwise.
        """
        credential_id = str(uuid4())

        with self.classify_failures(REGISTRATION_FAILED):
            try:
                with self.rw_uow() as uow:
                    if uow.credentials.exists_by_email(dto.email):
                        raise ServiceError.conflict(USER_EXISTS)
                    uow.credentials.create(
                        credential_id=credential_id,
                        email=dto.email,
                        password_hash=self.hasher.hash(dto.password),
                    )
            except IntegrityError as exc:
                # Lost the race between the existence check and the insert.
                if violates(exc, "uq_credentials_email", "credentials.email"):
                    raise ServiceError.conflict(USER_EXISTS, cause=exc) from exc
                raise

        log.info("auth.register.credential_created", extra={"credential_id": credential_id})

        try:
            self.profiles.create_profile(credential_id, dto.email)
        except Exception as exc:
            message = (
                exc.message if isinstance(exc, ProfileServiceError) else PROFILE_SERVICE_UNAVAILABLE
            )
            log.warning(
                "auth.register.profile_failed",
                extra={
                    "credential_id": credential_id,
                    "status_code": getattr(exc, "status_code", None),
                    "retryable": getattr(exc, "retryable", False),
                },
            )
            self._compensate_registration(credential_id)
            raise ServiceError.unauthorized(message, cause=exc) from exc

        with self.classify_failures(REGISTRATION_FAILED):
            with self.rw_uow():
                pair = self._issue_tokens(credential_id, dto.email)

        log.info("auth.register", extra={"credential_id": credential_id})
        return pair

    def _compensate_registration(self, credential_id: str) -> None:
        """Delete the credential of a registration whose profile call failed."""
        try:
            with self.rw_uow() as uow:
                uow.credentials.delete_by_id(credential_id)
        except Exception as exc:
            log.error(
                "auth.register.compensation_failed",
                extra={"credential_id": credential_id},
                exc_info=exc,
            )
            raise ServiceError.internal(REGISTRATION_FAILED, cause=exc) from exc
        log.info("auth.register.compensated", extra={"credential_id": credential_id})

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a token pair.

        Unknown email and wrong password are indistinguishable to the caller.

        :raises ServiceError: ``UNAUTHORIZED`` "Invalid email or password".
        """
        with self.classify_failures("Login failed"):
            with self.ro_uow() as uow:
                credential = uow.credentials.get_by_email(dto.email)
                if credential is None or not self.hasher.verify(
                    credential.password_hash, dto.password
                ):
                    log.info("auth.login.failed")
                    raise ServiceError.unauthorized(INVALID_CREDENTIALS)
                credential_id, email = credential.id, credential.email

            with self.rw_uow():
                pair = self._issue_tokens(credential_id, email)

        log.info("auth.login", extra={"credential_id": credential_id})
        return pair

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def _issue_tokens(self, credential_id: str, email: str) -> TokenPairOut:
        """
        Mint an access token and return the current refresh token.

        The most recent refresh record is reused while unexpired; an expired
        one is replaced in place, and a new record is created when none
        exists. Must run inside a read-write Unit of Work.
        """
        claims = TokenClaims(subject_id=credential_id, email=email)
        access = self.codec.sign(TokenDomain.ACCESS, claims)

        now = self.now_utc()
        current = self.refresh_tokens.find_latest_for_credential(credential_id)
        if current is not None and not current.is_expired(now):
            return TokenPairOut(access_token=access, refresh_token=current.token)

        refresh = self.codec.sign(TokenDomain.REFRESH, claims)
        expires_at = now + self.settings.refresh_expires
        if current is not None:
            self.refresh_tokens.update(current.id, token=refresh, expires_at=expires_at)
        else:
            self.refresh_tokens.create(
                credential_id=credential_id, token=refresh, expires_at=expires_at
            )
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Redeem a refresh token for a new token pair.

        Steps: verify in the refresh domain, look the record up, delete it
        atomically, load the owner, issue. Losing a concurrent redemption
        fails like an unknown token.

        :raises ServiceError: ``UNAUTHORIZED`` in every failure case.
        """
        token = dto.refresh_token
        try:
            self.codec.verify(TokenDomain.REFRESH, token)
        except TokenVerificationError as exc:
            raise ServiceError.unauthorized(INVALID_REFRESH_TOKEN, cause=exc) from exc

        with self.classify_failures(INVALID_REFRESH_TOKEN, ErrorKind.UNAUTHORIZED):
            with self.rw_uow() as uow:
                record = self.refresh_tokens.find_by_token(token)
                if record is None or record.is_expired(self.now_utc()):
                    raise ServiceError.unauthorized(INVALID_OR_EXPIRED_REFRESH_TOKEN)

                if not self.refresh_tokens.delete_by_token(token):
                    log.info("auth.refresh.lost_race", extra={"credential_id": record.credential_id})
                    raise ServiceError.unauthorized(INVALID_OR_EXPIRED_REFRESH_TOKEN)

                credential = uow.credentials.get(record.credential_id)
                if credential is None:
                    raise ServiceError.unauthorized(INVALID_OR_EXPIRED_REFRESH_TOKEN)

                pair = self._issue_tokens(credential.id, credential.email)

        log.info("auth.refresh.rotated", extra={"credential_id": record.credential_id})
        return pair

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """Revoke a refresh token. Unknown tokens are ignored."""
        with self.classify_failures("Logout failed"):
            with self.rw_uow():
                removed = self.refresh_tokens.delete_all_by_token(dto.refresh_token)
        log.info("auth.logout", extra={"removed": removed})

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate_token(self, access_token: str) -> TokenPayload:
        """
        Verify an access token and confirm its subject still exists.

        :returns: Verified payload.
        :raises ServiceError: ``UNAUTHORIZED`` for malformed or expired tokens,
            ``NOT_FOUND`` when the credential is gone, ``INTERNAL`` otherwise.
        """
        try:
            payload = self.codec.verify(TokenDomain.ACCESS, access_token)
        except TokenVerificationError as exc:
            if exc.reason in (VerificationFailure.MALFORMED, VerificationFailure.EXPIRED):
                raise ServiceError.unauthorized(INVALID_TOKEN, cause=exc) from exc
            log.error("auth.validate.verification_error", exc_info=exc)
            raise ServiceError.internal(TOKEN_VALIDATION_FAILED, cause=exc) from exc

        with self.classify_failures(TOKEN_VALIDATION_FAILED):
            with self.ro_uow() as uow:
                exists = uow.credentials.exists_by_id(payload.subject_id)

        if not exists:
            raise ServiceError.not_found(USER_NOT_FOUND)
        return payload

    # ------------------------------------------------------------------ #
    # Account
    # ------------------------------------------------------------------ #

    def delete_user(self, credential_id: str) -> None:
        """
        Delete a credential; its SQL refresh tokens cascade.

        :raises ServiceError: ``NOT_FOUND`` if the credential does not exist.
        """
        with self.classify_failures("Account deletion failed"):
            with self.rw_uow() as uow:
                if not uow.credentials.delete_by_id(credential_id):
                    raise ServiceError.not_found(USER_NOT_FOUND)
        log.info("auth.account.deleted", extra={"credential_id": credential_id})

    def get_credential(self, credential_id: str) -> CredentialOut:
        with self.classify_failures("Credential lookup failed"):
            with self.ro_uow() as uow:
                credential = uow.credentials.get(credential_id)
                if credential is None:
                    raise ServiceError.not_found(USER_NOT_FOUND)
                return CredentialOut(
                    id=credential.id,
                    email=credential.email,
                    created_at=as_utc(credential.created_at),
                    updated_at=as_utc(credential.updated_at),
                )
