"""Exception types raised by the Zenkit client and the rate-limit predicate."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from loguru import logger

from zenkit.constants import Header

RATE_LIMIT_STATUS = 429


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Body of a Zenkit error document (``{"error": {...}}``)."""

    name: str | None = None
    code: str | None = None
    status_code: int | None = None
    message: str | None = None
    description: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ErrorInfo | None":
        if not isinstance(payload, dict) or not isinstance(payload.get("error"), dict):
            return None
        error = payload["error"]
        status = error.get("statusCode")
        return cls(
            name=error.get("name"),
            code=None if error.get("code") is None else str(error["code"]),
            status_code=status if isinstance(status, int) else None,
            message=error.get("message"),
            description=error.get("description"),
        )

    def __str__(self) -> str:
        parts = [part for part in (self.name, self.code, self.message, self.description) if part]
        return " ".join(parts)


class ZenkitError(Exception):
    """Base class of every error raised by this package."""

    @property
    def is_rate_limited(self) -> bool:
        return False


class NetworkError(ZenkitError):
    """Connection failure or timeout while talking to the service."""


class MalformedResponseError(ZenkitError):
    """The response body is not valid JSON or does not have the expected shape."""


class AuthenticationError(ZenkitError):
    """The API token is missing, unusable, or rejected by the service."""


class NotFoundError(ZenkitError):
    """A remote resource or a locally resolved name does not exist."""


class InvalidValueError(ZenkitError):
    """A value cannot be encoded for the target field."""


class MultiCategoryError(ZenkitError):
    """A single choice was requested but several labels are set."""


class AlreadyInitializedError(ZenkitError):
    """``init_api`` was called twice."""


class NotInitializedError(ZenkitError):
    """``get_api`` was called before ``init_api``."""


class ApiError(ZenkitError):
    """The server answered with a non-success status."""

    def __init__(self, status_code: int, info: ErrorInfo | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.info = info
        self.body = body
        if info is not None:
            message = f"API Error {status_code}: {info}"
        else:
            message = f"Server returned status {status_code}:{body}"
        super().__init__(message)


class RateLimitedError(ApiError):
    """The service refused the request because the rate limit was reached."""

    def __init__(
        self,
        status_code: int,
        info: ErrorInfo | None = None,
        body: str = "",
        retry_after: float | None = None,
    ) -> None:
        super().__init__(status_code, info, body)
        self.retry_after = retry_after

    @property
    def is_rate_limited(self) -> bool:
        return True


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def is_rate_limit_response(status_code: int, headers: Mapping[str, str] | None = None) -> bool:
    """True for status 429 or for a response that reports zero remaining requests."""

    if status_code == RATE_LIMIT_STATUS:
        return True
    remaining = _header(headers, Header.RATE_LIMIT_REMAINING)
    return remaining is not None and remaining.strip() == "0"


def is_rate_limited(error_or_response: Any) -> bool:
    """
    Rate-limit predicate over either an exception or a response-like object.

    Exceptions answer through ``is_rate_limited``; anything carrying
    ``status_code`` and ``headers`` (a ``requests.Response`` for instance)
    is checked against the status and the remaining-requests header.
    """
    if isinstance(error_or_response, BaseException):
        return bool(getattr(error_or_response, "is_rate_limited", False))
    status_code = getattr(error_or_response, "status_code", None)
    if not isinstance(status_code, int):
        return False
    return is_rate_limit_response(status_code, getattr(error_or_response, "headers", None))


def _retry_after(headers: Mapping[str, str] | None) -> float | None:
    for name in (Header.RETRY_AFTER, Header.RATE_LIMIT_RESET):
        value = _header(headers, name)
        if value is None:
            continue
        try:
            return float(value)
        except ValueError:
            logger.debug("Ignoring non-numeric rate limit header", header=str(name), value=value)
    return None


def classify_response(status_code: int, headers: Mapping[str, str] | None, body: str) -> ZenkitError:
    """Build the exception that matches an unsuccessful response."""

    info: ErrorInfo | None = None
    try:
        info = ErrorInfo.from_payload(json.loads(body)) if body else None
    except ValueError:
        info = None

    if is_rate_limit_response(status_code, headers):
        return RateLimitedError(status_code, info, body, retry_after=_retry_after(headers))
    if status_code in (401, 403):
        detail = str(info) if info is not None else body
        return AuthenticationError(f"Authentication failed ({status_code}): {detail}")
    if status_code == 404:
        detail = str(info) if info is not None else body
        return NotFoundError(f"Resource not found: {detail}")
    return ApiError(status_code, info, body)
