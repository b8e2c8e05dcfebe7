from __future__ import annotations

import logging

import requests

from auth_service.services._shared.ports import ProfileServiceError, UserProfileClient

log = logging.getLogger(__name__)

INTERNAL_REQUEST_HEADER = "X-Internal-Request"
UNAVAILABLE_MESSAGE = "User profile service unavailable"


class HTTPUserProfileClient(UserProfileClient):
    """
    Create user profiles through the user-profile service's HTTP API.

    :param base_url: Service root, without trailing slash.
    :param timeout: Seconds allowed for connect and read.
    :param session: Optional pre-configured :class:`requests.Session`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({INTERNAL_REQUEST_HEADER: "true"})

    def create_profile(self, profile_id: str, email: str) -> None:
        """
        ``POST /user-profiles/`` with ``{id, email}``.

        :raises ProfileServiceError: ``status_code`` is the remote status for
            HTTP rejections and ``None`` for transport failures.
        """
        url = f"{self.base_url}/user-profiles/"
        try:
            resp = self.session.post(
                url, json={"id": profile_id, "email": email}, timeout=self.timeout
            )
        except requests.RequestException as exc:
            log.warning("user_profile.transport_error: %s", exc.__class__.__name__)
            raise ProfileServiceError(UNAVAILABLE_MESSAGE, retryable=True) from exc

        if resp.ok:
            return

        raise ProfileServiceError(
            self._remote_message(resp),
            status_code=resp.status_code,
            retryable=resp.status_code >= 500,
        )

    @staticmethod
    def _remote_message(resp: requests.Response) -> str:
        fallback = f"User profile service responded with {resp.status_code}"
        try:
            body = resp.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message:
                return message
        return fallback
