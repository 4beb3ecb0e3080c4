import os
from pathlib import Path
from unittest.mock import patch

from cms_snippets.config import DEFAULT_DATA_FILE, DEFAULT_SITE_URL, load_settings, read_env_file


def test_read_env_file_keeps_known_keys_only(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# CMS_API_URL=https://commented.example\n"
        "export CMS_SITE_URL='https://from-file.example/'\n"
        "LOG_LEVEL=debug\n"
        "OTHER_KEY=ignored\n"
        "not a pair\n",
        encoding="utf-8",
    )

    assert read_env_file(env_file) == {
        "CMS_SITE_URL": "https://from-file.example/",
        "LOG_LEVEL": "debug",
    }


def test_read_env_file_missing_is_empty(tmp_path: Path) -> None:
    assert read_env_file(tmp_path / ".env") == {}


def test_environment_wins_over_env_file_without_mutating_it(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "CMS_SITE_URL=https://from-file.example/\nLOG_LEVEL=debug\n",
        encoding="utf-8",
    )

    with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True):
        settings = load_settings(tmp_path)

        assert "CMS_SITE_URL" not in os.environ

    assert settings.site_url == "https://from-file.example/"
    assert settings.log_level == "WARNING"


def test_load_settings_defaults(tmp_path: Path) -> None:
    with patch.dict(os.environ, {}, clear=True):
        settings = load_settings(tmp_path)

    assert settings.data_file == DEFAULT_DATA_FILE
    assert settings.site_url == DEFAULT_SITE_URL
    assert settings.api_url is None
    assert settings.leaflet_version == "1.9.4"
    assert settings.log_level == "INFO"


def test_load_settings_from_environment(tmp_path: Path) -> None:
    env = {
        "CMS_DATA_FILE": str(tmp_path / "export.json"),
        "CMS_API_URL": "https://cms.example/api",
        "LEAFLET_VERSION": "1.9.3",
        "LOG_LEVEL": "debug",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = load_settings(tmp_path)

    assert settings.data_file == tmp_path / "export.json"
    assert settings.api_url == "https://cms.example/api"
    assert settings.leaflet_version == "1.9.3"
    assert settings.log_level == "DEBUG"
