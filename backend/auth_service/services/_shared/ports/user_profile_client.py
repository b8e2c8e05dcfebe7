from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class ProfileServiceError(Exception):
    """
    Failure to create the remote user profile.

    :param message: Remote-provided or generic message.
    :param status_code: Remote HTTP status; ``None`` for transport failures.
    :param retryable: Whether a later attempt could succeed (5xx, timeouts).
    """

    def __init__(self, message: str, *, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


class UserProfileClient(Protocol):
    """Port for the user-profile service."""

    def create_profile(self, profile_id: str, email: str) -> None:
        """
        Create the profile record sharing ``profile_id`` with the credential.

        :raises ProfileServiceError: When the remote rejects or is unreachable.
        """


@dataclass
class InMemoryUserProfileClient(UserProfileClient):
    """Records created profiles; set ``fail_with`` to simulate a remote failure."""

    profiles: dict[str, str] = field(default_factory=dict)
    fail_with: ProfileServiceError | None = None

    def create_profile(self, profile_id: str, email: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.profiles[profile_id] = email
