"""
Configuration of the Zenkit client, read from ``ZENKIT_*`` environment variables or a ``.env`` file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

from zenkit.constants import DEFAULT_ENDPOINT


class ZenkitSettings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='ZENKIT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    API_TOKEN: str | None = None
    ENDPOINT: str = DEFAULT_ENDPOINT
    CONNECT_TIMEOUT: float = 5.0
    READ_TIMEOUT: float = 30.0

    @property
    def base_url(self) -> str:
        return self.ENDPOINT.rstrip('/')


def get_settings() -> ZenkitSettings:
    """Read settings from the current environment."""
    return ZenkitSettings()
