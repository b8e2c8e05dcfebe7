"""Shared API helpers for responses, timing and authentication."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from auth_service.core.errors import Unauthorized
from auth_service.core.services import get_auth_service

F = TypeVar("F", bound=Callable[..., Any])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success_response(data: Any, message: str, *, status: int = 200) -> Response:
    """Wrap ``data`` in the ``{success, data, message}`` envelope."""

    return json_response({"success": True, "data": data, "message": message}, status=status)


def bearer_token() -> str:
    """Extract the Bearer token from ``Authorization``.

    :raises Unauthorized: When the header is missing or not a Bearer credential.
    """

    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("No token provided")
    return token.strip()


def require_auth(func: F) -> F:
    """Resolve the Bearer access token and expose its payload as ``g.auth``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.auth = get_auth_service().validate_token(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
