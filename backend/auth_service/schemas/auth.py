"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=128))


class LoginSchema(Schema):
    """Input payload for authenticating a credential."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshTokenSchema(Schema):
    """Input payload carrying a refresh token (refresh and logout)."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class TokenPayloadSchema(Schema):
    """Response payload of a validated access token."""

    subject_id = fields.String(required=True, data_key="subjectId")
    email = fields.String(required=True)
    iat = fields.Function(lambda p: int(p.issued_at.timestamp()))
    exp = fields.Function(lambda p: int(p.expires_at.timestamp()))


class CredentialSchema(Schema):
    """Public representation of a credential."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
