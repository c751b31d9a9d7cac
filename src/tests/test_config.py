"""Tests for Discogs settings loading."""

from unittest.mock import patch

import pytest

from vinylshelf.config.config_manager import (
    DEFAULT_USER_AGENT,
    DiscogsSettings,
    load_discogs_settings,
    load_env_file,
    sync_readiness,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DISCOGS_USER_AGENT", "DISCOGS_TOKEN", "DISCOGS_USERNAME"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_from_environment(clean_env):
    clean_env.setenv("DISCOGS_USER_AGENT", "Shelf/2.0")
    clean_env.setenv("DISCOGS_TOKEN", "abc")
    clean_env.setenv("DISCOGS_USERNAME", "collector")

    settings = load_discogs_settings(load_env=False)

    assert settings == DiscogsSettings(user_agent="Shelf/2.0", token="abc", username="collector")


def test_defaults_and_empty_values(clean_env):
    clean_env.setenv("DISCOGS_TOKEN", "")

    settings = load_discogs_settings(load_env=False)

    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.token is None
    assert settings.username is None


def test_sync_readiness_reports_missing_variables():
    assert sync_readiness(DiscogsSettings(token="abc", username="collector")) == {
        "ready": True,
        "missing": [],
    }
    assert sync_readiness(DiscogsSettings(token="abc")) == {
        "ready": False,
        "missing": ["DISCOGS_USERNAME"],
    }
    assert sync_readiness(DiscogsSettings()) == {
        "ready": False,
        "missing": ["DISCOGS_USERNAME", "DISCOGS_TOKEN"],
    }


def test_load_env_file_prefers_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("DISCOGS_USERNAME=collector\n")

    with patch("vinylshelf.config.config_manager.load_dotenv") as mock_load:
        loaded = load_env_file()

    assert loaded is not None
    assert loaded.name == ".env"
    mock_load.assert_called_once_with(loaded)


def test_load_env_file_without_any_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    with (
        patch("vinylshelf.config.config_manager.get_app_config_path", return_value=tmp_path / "config"),
        patch("vinylshelf.config.config_manager.load_dotenv") as mock_load,
    ):
        assert load_env_file() is None

    mock_load.assert_not_called()
