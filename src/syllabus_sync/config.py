"""Configuration management for syllabus-sync."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SYLLABUS_SYNC_HOME = Path(os.environ.get("SYLLABUS_SYNC_HOME", Path.home() / "syllabus-sync"))
CONFIG_FILE = SYLLABUS_SYNC_HOME / "config" / "syllabus-sync.conf"
GOOGLE_TOKEN_DIR = SYLLABUS_SYNC_HOME / "config" / "google"


@dataclass
class Config:
    """syllabus-sync configuration."""

    timezone: str = "America/Chicago"
    calendar_id: str = "primary"
    calendar_name: str = "Syllabus"
    default_class_id: str = "default-class"
    google_client_secret_file: str = ""
    google_token_dir: str = str(GOOGLE_TOKEN_DIR)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from syllabus-sync.conf."""
    config = Config()
    config_file = path or CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "timezone":
                    config.timezone = value
                case "calendar_id":
                    config.calendar_id = value
                case "calendar_name":
                    config.calendar_name = value
                case "default_class_id":
                    config.default_class_id = value
                case "google_client_secret_file":
                    config.google_client_secret_file = value
                case "google_token_dir":
                    config.google_token_dir = value
                case "openai_api_key":
                    config.openai_api_key = value
                case "openai_model":
                    config.openai_model = value
                case _:
                    logger.debug(f"Ignoring unknown config key: {key}")

    if not config.openai_api_key:
        config.openai_api_key = os.environ.get("OPENAI_API_KEY", "")

    return config
