"""Python client for the Zenkit REST API."""

from threading import Lock

from zenkit.activity import Activity, ChangedData, ElementChange, FromTo, decode_activities, decode_webhook_payload
from zenkit.dates import DateTime
from zenkit.database.base import ApiClient
from zenkit.errors import (
    AlreadyInitializedError,
    ApiError,
    AuthenticationError,
    InvalidValueError,
    MalformedResponseError,
    MultiCategoryError,
    NetworkError,
    NotFoundError,
    NotInitializedError,
    RateLimitedError,
    ZenkitError,
    is_rate_limited,
)
from zenkit.item import Item
from zenkit.list_info import (
    FieldSetVal,
    FieldVal,
    ListInfo,
    fset_f,
    fset_i,
    fset_id,
    fset_s,
    fset_t,
    fset_vid,
    fset_vs,
    fup_f,
    fup_i,
    fup_id,
    fup_s,
    fup_t,
    fup_vid,
    fup_vs,
)
from zenkit.settings import ZenkitSettings

_api: ApiClient | None = None
_api_lock = Lock()


def init_api(settings: ZenkitSettings | None = None, *, dotenv_path: str | None = None) -> ApiClient:
    """Create the process-wide client; a second call raises ``AlreadyInitializedError``."""
    global _api
    with _api_lock:
        if _api is not None:
            raise AlreadyInitializedError("Zenkit API client is already initialized")
        _api = ApiClient(settings, dotenv_path=dotenv_path)
        return _api


def get_api() -> ApiClient:
    with _api_lock:
        if _api is None:
            raise NotInitializedError("Zenkit API client is not initialized; call init_api() first")
        return _api


__all__ = [
    "Activity",
    "AlreadyInitializedError",
    "ApiClient",
    "ApiError",
    "AuthenticationError",
    "ChangedData",
    "DateTime",
    "ElementChange",
    "FieldSetVal",
    "FieldVal",
    "FromTo",
    "InvalidValueError",
    "Item",
    "ListInfo",
    "MalformedResponseError",
    "MultiCategoryError",
    "NetworkError",
    "NotFoundError",
    "NotInitializedError",
    "RateLimitedError",
    "ZenkitError",
    "ZenkitSettings",
    "decode_activities",
    "decode_webhook_payload",
    "fset_f",
    "fset_i",
    "fset_id",
    "fset_s",
    "fset_t",
    "fset_vid",
    "fset_vs",
    "fup_f",
    "fup_i",
    "fup_id",
    "fup_s",
    "fup_t",
    "fup_vid",
    "fup_vs",
    "get_api",
    "init_api",
    "is_rate_limited",
]
