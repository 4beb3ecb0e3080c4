from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from cms_snippets.map_renderer import DEFAULT_LEAFLET_VERSION

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_FILE = BASE_DIR / "data" / "resources.json"
DEFAULT_SITE_URL = "http://localhost:8000/"


@dataclass(frozen=True, slots=True)
class Settings:
    data_file: Path = DEFAULT_DATA_FILE
    site_url: str = DEFAULT_SITE_URL
    api_url: str | None = None
    leaflet_version: str = DEFAULT_LEAFLET_VERSION
    log_level: str = "INFO"


ENV_FILENAME = ".env"
SETTING_KEYS = ("CMS_DATA_FILE", "CMS_SITE_URL", "CMS_API_URL", "LEAFLET_VERSION", "LOG_LEVEL")


def read_env_file(path: Path) -> dict[str, str]:
    """Return the settings found in a dotenv-style file.

    Only the keys listed in SETTING_KEYS are kept; ``export`` prefixes,
    comments and surrounding quotes are dropped.
    """
    if not path.exists():
        return {}
    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        name, sep, value = raw_line.strip().removeprefix("export ").partition("=")
        name = name.strip()
        if not sep or name not in SETTING_KEYS:
            continue
        values[name] = value.strip().strip("\"'")
    return values


def load_settings(base_dir: Path = BASE_DIR) -> Settings:
    """Resolve settings from the process environment, then ``base_dir/.env``."""
    values = read_env_file(base_dir / ENV_FILENAME)
    values.update({key: os.environ[key] for key in SETTING_KEYS if key in os.environ})

    def setting(key: str) -> str:
        return values.get(key, "").strip()

    return Settings(
        data_file=Path(setting("CMS_DATA_FILE")) if setting("CMS_DATA_FILE") else DEFAULT_DATA_FILE,
        site_url=setting("CMS_SITE_URL") or DEFAULT_SITE_URL,
        api_url=setting("CMS_API_URL") or None,
        leaflet_version=setting("LEAFLET_VERSION") or DEFAULT_LEAFLET_VERSION,
        log_level=(setting("LOG_LEVEL") or "INFO").upper(),
    )

