"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, g, request

from auth_service.api.deps import (
    bearer_token,
    require_auth,
    success_response,
    timing,
)
from auth_service.core.services import get_auth_service
from auth_service.schemas import (
    CredentialSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    TokenPayloadSchema,
)
from auth_service.services.auth.dto import LoginIn, LogoutIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
token_pair_schema = TokenPairSchema()
token_payload_schema = TokenPayloadSchema()
credential_schema = CredentialSchema()


@bp.post("/register")
@timing
def register():
    """Register a credential and return its first token pair."""

    data = register_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().register(RegisterIn(email=data["email"], password=data["password"]))
    return success_response(
        token_pair_schema.dump(pair), "User registered successfully", status=201
    )


@bp.post("/login")
@timing
def login():
    data = login_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    return success_response(token_pair_schema.dump(pair), "User logged in successfully")


@bp.post("/refresh")
@timing
def refresh():
    """Redeem a refresh token for a new pair."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    pair = get_auth_service().refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return success_response(token_pair_schema.dump(pair), "Tokens refreshed successfully")


@bp.post("/logout")
@timing
def logout():
    data = refresh_schema.load(request.get_json(silent=True) or {})
    get_auth_service().logout(LogoutIn(refresh_token=data["refresh_token"]))
    return success_response(None, "User logged out successfully")


@bp.post("/validate")
@timing
def validate():
    """Validate a Bearer access token on behalf of other services."""

    payload = get_auth_service().validate_token(bearer_token())
    return success_response(token_payload_schema.dump(payload), "Token is valid")


@bp.get("/profile")
@require_auth
@timing
def profile():
    credential = get_auth_service().get_credential(g.auth.subject_id)
    return success_response(credential_schema.dump(credential), "Profile retrieved successfully")


@bp.delete("/profile")
@require_auth
@timing
def delete_account():
    """Delete the authenticated account."""

    get_auth_service().delete_user(g.auth.subject_id)
    return success_response(None, "Account deleted successfully")
