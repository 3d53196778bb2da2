"""Reusable HTTP client helpers for the Zenkit API."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock, local
from time import perf_counter
from typing import Any, Mapping, MutableMapping, Optional

import requests
from loguru import logger

from zenkit.constants import Header
from zenkit.errors import (
    AuthenticationError,
    MalformedResponseError,
    NetworkError,
    classify_response,
    is_rate_limit_response,
)
from zenkit.settings import ZenkitSettings, get_settings
from zenkit.version import user_agent

from .endpoints import Endpoint


@dataclass(frozen=True, slots=True)
class TimeoutSettings:
    """Pair of connect/read timeouts for HTTP requests."""

    connect: float = 5.0
    read: float = 30.0

    def as_tuple(self) -> tuple[float, float]:
        """Return the timeout as ``(connect, read)`` tuple."""

        return (self.connect, self.read)


@dataclass(slots=True)
class RequestSpec:
    """Description of a Zenkit API call."""

    endpoint: Endpoint
    headers: Optional[Mapping[str, str]] = None
    params: Optional[Mapping[str, Any]] = None
    json_body: Any | None = None
    timeout: TimeoutSettings | None = None


@dataclass(slots=True)
class EndpointCallResult:
    """Structured response metadata for a Zenkit API call."""

    endpoint: Endpoint
    request_headers: Mapping[str, str]
    request_params: Mapping[str, Any]
    status_code: int
    elapsed: float
    text: str
    json: Any | None
    response_headers: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class RateLimitState:
    """Values of the ``X-RateLimit-*`` headers of the latest response."""

    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None


def _header_int(headers: Mapping[str, str], name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        value = next((v for k, v in headers.items() if k.lower() == name.lower()), None)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ZenkitAPIClient:
    """High level client that wraps HTTP calls with authentication, timeout and logging."""

    def __init__(
        self,
        settings: ZenkitSettings | None = None,
        *,
        default_timeout: TimeoutSettings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_url = self._settings.base_url
        self._session_local = local()
        self._default_timeout = default_timeout or TimeoutSettings(
            connect=self._settings.CONNECT_TIMEOUT, read=self._settings.READ_TIMEOUT
        )
        self._user_agent = user_agent()
        self._last_call_lock = Lock()
        self._last_call_result: EndpointCallResult | None = None
        self._rate_limit = RateLimitState()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def last_call_result(self) -> EndpointCallResult | None:
        """Return metadata for the most recent API call in a thread-safe way."""

        with self._last_call_lock:
            return self._last_call_result

    @property
    def rate_limit_state(self) -> RateLimitState:
        with self._last_call_lock:
            return self._rate_limit

    def request(
        self,
        spec: RequestSpec,
        *,
        expect_json: bool = False,
        operation_name: str | None = None,
    ) -> EndpointCallResult:
        """Execute an HTTP request and capture structured metadata.

        Raises a ``ZenkitError`` subclass for transport failures, non-success
        statuses and undecodable JSON bodies.
        """

        timeout = spec.timeout if spec.timeout is not None else self._default_timeout
        headers = self._build_headers(spec.headers)
        params = self._build_params(spec.params)
        url = self._resolve_url(spec.endpoint)
        op_name = operation_name or spec.endpoint.name

        start = perf_counter()
        logger.debug(
            "Calling Zenkit endpoint",
            endpoint=spec.endpoint.name,
            method=spec.endpoint.method,
            url=url,
            params=params,
        )
        try:
            response = self._get_session().request(
                method=spec.endpoint.method,
                url=url,
                headers=headers,
                params=params if params else None,
                json=spec.json_body,
                timeout=timeout.as_tuple(),
            )
        except requests.Timeout as exc:
            logger.warning(
                "Request timeout",
                endpoint=spec.endpoint.name,
                url=url,
                timeout=timeout.as_tuple(),
            )
            raise NetworkError(f"Timeout calling {op_name}") from exc
        except requests.RequestException as exc:
            logger.error(
                "Request error",
                endpoint=spec.endpoint.name,
                url=url,
                error=str(exc),
            )
            raise NetworkError(f"HTTP error calling {op_name}: {exc}") from exc

        elapsed = perf_counter() - start
        response_headers = dict(response.headers or {})
        self._record_rate_limit(response_headers)
        logger.debug(
            "Received response",
            endpoint=spec.endpoint.name,
            status=response.status_code,
            elapsed=f"{elapsed:.3f}s",
        )

        if not 200 <= response.status_code < 300:
            error = classify_response(response.status_code, response_headers, response.text)
            if error.is_rate_limited:
                logger.warning(
                    "Zenkit rate limit reached",
                    endpoint=spec.endpoint.name,
                    status=response.status_code,
                    retry_after=getattr(error, "retry_after", None),
                )
            else:
                logger.error(
                    "Zenkit endpoint returned error",
                    endpoint=spec.endpoint.name,
                    status=response.status_code,
                    body=response.text[:500],
                )
            raise error

        if is_rate_limit_response(response.status_code, response_headers):
            logger.warning("Zenkit rate limit exhausted", endpoint=spec.endpoint.name)

        json_payload: Any | None = None
        if expect_json and response.content:
            try:
                json_payload = response.json()
            except ValueError as exc:
                logger.error(
                    "Failed to decode JSON response",
                    endpoint=spec.endpoint.name,
                    body=response.text[:500],
                )
                raise MalformedResponseError(f"Invalid JSON returned by {op_name}") from exc

        result = EndpointCallResult(
            endpoint=spec.endpoint,
            request_headers=headers,
            request_params=params,
            status_code=response.status_code,
            elapsed=elapsed,
            text=response.text,
            json=json_payload,
            response_headers=response_headers,
        )
        with self._last_call_lock:
            self._last_call_result = result
        return result

    def request_json(
        self, spec: RequestSpec, *, operation_name: str | None = None
    ) -> Any:
        """Execute request expecting JSON payload and return parsed body."""

        result = self.request(spec, expect_json=True, operation_name=operation_name)
        return result.json

    def close(self) -> None:
        session = getattr(self._session_local, "session", None)
        if session is not None:
            session.close()
            self._session_local.session = None

    def __enter__(self) -> "ZenkitAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _resolve_url(self, endpoint: Endpoint) -> str:
        if endpoint.url.startswith(("http://", "https://")):
            return endpoint.url
        return f"{self._base_url}{endpoint.url}"

    def _build_headers(
        self, headers: Optional[Mapping[str, str]]
    ) -> MutableMapping[str, str]:
        token = self._settings.API_TOKEN
        if not token:
            raise AuthenticationError("Zenkit API token is not set (ZENKIT_API_TOKEN)")
        if not token.isascii():
            raise AuthenticationError("Zenkit API token has non-ascii chars")
        merged: MutableMapping[str, str] = {
            Header.API_KEY: token,
            Header.CONTENT_TYPE: "application/json",
            Header.USER_AGENT: self._user_agent,
        }
        if headers:
            merged.update(headers)
        return merged

    @staticmethod
    def _build_params(
        params: Optional[Mapping[str, Any]]
    ) -> MutableMapping[str, Any]:
        if not params:
            return {}
        return {k: v for k, v in params.items() if v is not None}

    def _record_rate_limit(self, headers: Mapping[str, str]) -> None:
        state = RateLimitState(
            limit=_header_int(headers, Header.RATE_LIMIT_LIMIT),
            remaining=_header_int(headers, Header.RATE_LIMIT_REMAINING),
            reset=_header_int(headers, Header.RATE_LIMIT_RESET),
        )
        with self._last_call_lock:
            self._rate_limit = state

    def _get_session(self) -> requests.Session:
        session = getattr(self._session_local, "session", None)
        if session is None:
            session = requests.Session()
            self._session_local.session = session
        return session
