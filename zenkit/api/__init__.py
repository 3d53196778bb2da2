"""Zenkit API client utilities."""

from .client import (
    Endpoint,
    EndpointCallResult,
    RateLimitState,
    RequestSpec,
    TimeoutSettings,
    ZenkitAPIClient,
)
from .endpoints import ZenkitEndpoints

__all__ = [
    "Endpoint",
    "EndpointCallResult",
    "RateLimitState",
    "RequestSpec",
    "TimeoutSettings",
    "ZenkitAPIClient",
    "ZenkitEndpoints",
]
