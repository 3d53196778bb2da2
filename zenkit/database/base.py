from dotenv import load_dotenv
from loguru import logger

from zenkit.api.client import RateLimitState
from zenkit.database.db_entries import DatabaseEntries
from zenkit.database.db_users import DatabaseUsers
from zenkit.database.db_webhooks import DatabaseWebhooks
from zenkit.database.db_workspaces import DatabaseWorkspaces
from zenkit.settings import ZenkitSettings, get_settings


class ApiClient(DatabaseWorkspaces, DatabaseEntries, DatabaseUsers, DatabaseWebhooks):
    """
    Entry point to the Zenkit API.

    Settings come from ``ZENKIT_*`` environment variables unless given; a
    ``dotenv_path`` is loaded into the environment first.
    """

    def __init__(self, settings: ZenkitSettings | None = None, *, dotenv_path: str | None = None):
        if dotenv_path is not None:
            load_dotenv(dotenv_path, override=True)
        self.settings = settings or get_settings()
        super().__init__()

    def reset(self):
        # every mixin that keeps state clears it
        for cls in type(self).__mro__:
            if cls in (ApiClient, object):
                continue
            reset_fn = cls.__dict__.get('reset')
            if callable(reset_fn):
                logger.debug(f'Resetting {cls.__name__}...')
                reset_fn(self)

    @property
    def rate_limit_state(self) -> RateLimitState:
        return self._api_client.rate_limit_state

    @property
    def rate_limit(self) -> int | None:
        """``X-RateLimit-Limit`` of the latest response."""
        return self.rate_limit_state.limit

    @property
    def rate_limit_remaining(self) -> int | None:
        return self.rate_limit_state.remaining

    @property
    def rate_limit_reset(self) -> int | None:
        return self.rate_limit_state.reset

    def close(self) -> None:
        self._api_client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
