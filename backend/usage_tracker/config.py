import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

_config_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or decoded."""


class HttpSettings(BaseModel):
    """Address the HTTP server binds to."""

    host: str = "127.0.0.1"
    port: int = 8080


class MongoSettings(BaseModel):
    """MongoDB connection settings."""

    url: str = "mongodb://localhost:27017"
    db: str = "xmppvox"
    # Seconds; keeps startup and unreachable-server responses short
    connect_timeout: float = 5.0


class Settings(BaseSettings):
    """Application settings loaded from a JSON file, with env var fallback."""

    app_title: str = "XMPPVOX Usage Tracker"
    app_version: str = "1.0.0"

    http: HttpSettings = HttpSettings()
    mongo: MongoSettings = MongoSettings()

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_mongo: str = "WARNING"         # pymongo driver internals
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        env_nested_delimiter="__",
        extra="ignore",
    )


def resolve_config_path(path: str) -> Path:
    """Expand environment variables and anchor relative paths at the cwd."""
    expanded = Path(os.path.expandvars(path))
    if expanded.is_absolute():
        return expanded
    return Path.cwd() / expanded


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """Read a JSON configuration file into a Settings instance.

    Values present in the file take precedence; anything the file omits
    falls back to ``TRACKER_*`` environment variables and then to defaults.
    """
    config_path = resolve_config_path(path)
    try:
        raw = json.loads(config_path.read_text("utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a JSON object")

    try:
        settings = Settings(**raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    _config_logger.debug("Loaded configuration from %s", config_path)
    return settings
