"""
Tests for the HTTP layer: headers, URL building, error classification and rate-limit tracking.
"""
import json
from dataclasses import dataclass, field
from unittest.mock import MagicMock, patch

import pytest
import requests

from zenkit.api import Endpoint, RequestSpec, TimeoutSettings, ZenkitAPIClient, ZenkitEndpoints
from zenkit.errors import (
    ApiError,
    AuthenticationError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    is_rate_limited,
)
from zenkit.settings import ZenkitSettings


@dataclass
class _FakeResponse:
    status_code: int = 200
    text: str = ""
    headers: dict = field(default_factory=dict)

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def settings():
    return ZenkitSettings(API_TOKEN="test-token", ENDPOINT="https://zenkit.example/api/v1/")


@pytest.fixture
def client(settings):
    return ZenkitAPIClient(settings)


@pytest.fixture
def session(client):
    fake_session = MagicMock()
    with patch.object(ZenkitAPIClient, '_get_session', return_value=fake_session):
        yield fake_session


def _respond(session, status_code=200, body=None, headers=None):
    text = "" if body is None else (body if isinstance(body, str) else json.dumps(body))
    session.request.return_value = _FakeResponse(status_code, text, headers or {})


def test_request_sends_auth_headers_and_resolves_url(client, session):
    _respond(session, body=[])

    client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_ELEMENTS.format(list_id=3)))

    kwargs = session.request.call_args.kwargs
    assert kwargs['method'] == "GET"
    assert kwargs['url'] == "https://zenkit.example/api/v1/lists/3/elements"
    assert kwargs['headers']['Zenkit-API-Key'] == "test-token"
    assert kwargs['headers']['Content-Type'] == "application/json"
    assert kwargs['headers']['User-Agent'].startswith("zenkit py ")
    assert kwargs['timeout'] == (5.0, 30.0)


def test_path_values_are_url_quoted(client, session):
    _respond(session, body={})

    client.request_json(RequestSpec(endpoint=ZenkitEndpoints.GET_WORKSPACE.format(workspace_id="a b/c")))

    assert session.request.call_args.kwargs['url'].endswith("/workspaces/a%20b%2Fc")


def test_request_body_params_and_timeout_override(client, session):
    _respond(session, body={"ok": True})
    spec = RequestSpec(
        endpoint=ZenkitEndpoints.CREATE_ENTRY.format(list_id=3),
        params={"keep": 1, "drop": None},
        json_body={"x_text": "y"},
        timeout=TimeoutSettings(connect=1.0, read=2.0),
    )

    assert client.request_json(spec) == {"ok": True}

    kwargs = session.request.call_args.kwargs
    assert kwargs['method'] == "POST"
    assert kwargs['params'] == {"keep": 1}
    assert kwargs['json'] == {"x_text": "y"}
    assert kwargs['timeout'] == (1.0, 2.0)


def test_missing_token_raises_before_sending(session):
    client = ZenkitAPIClient(ZenkitSettings(API_TOKEN=None))

    with pytest.raises(AuthenticationError):
        client.request(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))
    session.request.assert_not_called()


def test_non_ascii_token_is_rejected(session):
    client = ZenkitAPIClient(ZenkitSettings(API_TOKEN="tøken"))

    with pytest.raises(AuthenticationError, match="non-ascii"):
        client.request(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))


@pytest.mark.parametrize("exc", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_transport_failures_become_network_errors(client, session, exc):
    session.request.side_effect = exc

    with pytest.raises(NetworkError):
        client.request(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))


@pytest.mark.parametrize("status, error_type", [
    (401, AuthenticationError),
    (403, AuthenticationError),
    (404, NotFoundError),
    (500, ApiError),
])
def test_error_statuses_are_classified(client, session, status, error_type):
    _respond(session, status_code=status, body="failure")

    with pytest.raises(error_type) as exc_info:
        client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))

    assert not is_rate_limited(exc_info.value)


def test_rate_limited_response(client, session):
    _respond(session, status_code=429, body="", headers={
        "X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "0", "Retry-After": "7",
    })

    with pytest.raises(RateLimitedError) as exc_info:
        client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))

    assert is_rate_limited(exc_info.value)
    assert exc_info.value.retry_after == 7.0
    assert client.rate_limit_state.remaining == 0


def test_successful_response_with_exhausted_limit_still_returns(client, session):
    _respond(session, body=[], headers={"X-RateLimit-Remaining": "0"})

    assert client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS)) == []
    assert is_rate_limited(session.request.return_value)
    assert client.rate_limit_state.remaining == 0


def test_rate_limit_headers_are_recorded(client, session):
    _respond(session, body=[], headers={
        "X-RateLimit-Limit": "100", "x-ratelimit-remaining": "42", "X-RateLimit-Reset": "1700000000",
    })

    client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))

    state = client.rate_limit_state
    assert (state.limit, state.remaining, state.reset) == (100, 42, 1700000000)


def test_invalid_json_is_malformed(client, session):
    _respond(session, body="<html>oops</html>")

    with pytest.raises(MalformedResponseError):
        client.request_json(RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS))


def test_empty_body_gives_none(client, session):
    _respond(session, body=None)

    assert client.request_json(RequestSpec(endpoint=ZenkitEndpoints.DELETE_WEBHOOK.format(webhook_id=1))) is None


def test_last_call_result_is_recorded(client, session):
    _respond(session, status_code=201, body={"id": 1})

    client.request_json(RequestSpec(endpoint=ZenkitEndpoints.CREATE_WEBHOOK), operation_name="create webhook")

    result = client.last_call_result
    assert result.status_code == 201
    assert result.json == {"id": 1}
    assert result.endpoint.name == "create_webhook"


def test_absolute_endpoint_url_is_used_as_is(client, session):
    _respond(session, body={})
    endpoint = Endpoint("custom", "GET", "https://other.example/x")

    client.request_json(RequestSpec(endpoint=endpoint))

    assert session.request.call_args.kwargs['url'] == "https://other.example/x"
