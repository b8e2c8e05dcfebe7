"""Unit tests for the HTTP user-profile client, mocking the remote with ``responses``."""

from __future__ import annotations

import json

import pytest
import requests
import responses

from auth_service.infra.http.user_profile_client import HTTPUserProfileClient
from auth_service.services._shared.ports import ProfileServiceError

BASE_URL = "http://user-service.test"
ENDPOINT = f"{BASE_URL}/user-profiles/"


@pytest.fixture
def client() -> HTTPUserProfileClient:
    return HTTPUserProfileClient(BASE_URL + "/", timeout=1.0)


@responses.activate
def test_create_profile_posts_id_and_email(client) -> None:
    # Arrange
    responses.add(responses.POST, ENDPOINT, json={"success": True}, status=201)

    # Act
    client.create_profile("cred-1", "profile@example.com")

    # Assert
    assert len(responses.calls) == 1
    sent = responses.calls[0].request
    assert json.loads(sent.body) == {"id": "cred-1", "email": "profile@example.com"}
    assert sent.headers["X-Internal-Request"] == "true"


@responses.activate
def test_rejection_carries_remote_message(client) -> None:
    responses.add(
        responses.POST, ENDPOINT, json={"message": "Profile already exists"}, status=409
    )

    with pytest.raises(ProfileServiceError) as exc:
        client.create_profile("cred-2", "dup@example.com")

    assert exc.value.message == "Profile already exists"
    assert exc.value.status_code == 409
    assert exc.value.retryable is False


@responses.activate
def test_server_error_without_json_body(client) -> None:
    responses.add(responses.POST, ENDPOINT, body="upstream exploded", status=503)

    with pytest.raises(ProfileServiceError) as exc:
        client.create_profile("cred-3", "down@example.com")

    assert exc.value.message == "User profile service responded with 503"
    assert exc.value.status_code == 503
    assert exc.value.retryable is True


@responses.activate
def test_transport_failure(client) -> None:
    responses.add(responses.POST, ENDPOINT, body=requests.ConnectionError("refused"))

    with pytest.raises(ProfileServiceError) as exc:
        client.create_profile("cred-4", "offline@example.com")

    assert exc.value.message == "User profile service unavailable"
    assert exc.value.status_code is None
    assert exc.value.retryable is True
