"""
Tests for the process-wide client handle, settings loading and the User-Agent string.
"""
import pytest

import zenkit
from zenkit import AlreadyInitializedError, ApiClient, NotInitializedError, ZenkitSettings
from zenkit.version import get_version, user_agent


@pytest.fixture(autouse=True)
def clean_global_api():
    # pylint: disable=protected-access
    zenkit._api = None
    yield
    zenkit._api = None


def test_get_api_before_init_raises():
    with pytest.raises(NotInitializedError):
        zenkit.get_api()


def test_init_api_once():
    api = zenkit.init_api(ZenkitSettings(API_TOKEN="test-token"))

    assert isinstance(api, ApiClient)
    assert zenkit.get_api() is api


def test_second_init_raises():
    zenkit.init_api(ZenkitSettings(API_TOKEN="test-token"))

    with pytest.raises(AlreadyInitializedError):
        zenkit.init_api(ZenkitSettings(API_TOKEN="other"))


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ZENKIT_API_TOKEN", "env-token")
    monkeypatch.setenv("ZENKIT_ENDPOINT", "https://zenkit.example/api/v1/")
    monkeypatch.setenv("ZENKIT_READ_TIMEOUT", "12.5")

    settings = ZenkitSettings()

    assert settings.API_TOKEN == "env-token"
    assert settings.base_url == "https://zenkit.example/api/v1"
    assert settings.READ_TIMEOUT == 12.5
    assert settings.CONNECT_TIMEOUT == 5.0


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.delenv("ZENKIT_API_TOKEN", raising=False)
    dotenv = tmp_path / "zenkit.env"
    dotenv.write_text("ZENKIT_API_TOKEN=from-dotenv\n", encoding="utf-8")

    try:
        api = ApiClient(dotenv_path=str(dotenv))
        assert api.settings.API_TOKEN == "from-dotenv"
    finally:
        monkeypatch.delenv("ZENKIT_API_TOKEN", raising=False)


def test_user_agent():
    assert get_version()
    assert user_agent() == f"zenkit py {get_version()}"
