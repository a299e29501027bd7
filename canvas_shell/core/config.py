"""
Configuration Management.

Loads the REST transport settings from the per-user JSON file shared with the
Canvas server, and the shell's own logging settings from the packaged YAML.

Transport (JSON, ~/.canvas/config/transports.rest.json):
    protocol, host, port, baseUri, auth {type, token}, timeout (ms)

    The file is merged over DEFAULT_TRANSPORT_CONFIG. A missing file means
    defaults. A file that cannot be parsed or validated is reported with a
    warning and the defaults are used unmodified.

Environment (CANVAS_*):
    CANVAS_CONFIG_PATH - alternate transport file location
    CANVAS_TOKEN       - overrides auth.token

Settings (YAML, canvas_shell/config/):
    logging.yaml - Logging configuration
"""

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from canvas_shell.core.config_schema import LoggingSchema, TransportSchema
from canvas_shell.core.exceptions import ConfigError

CANVAS_HOME = Path.home() / ".canvas"
DEFAULT_CONFIG_PATH = CANVAS_HOME / "config" / "transports.rest.json"
SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config"

CONFIG_FALLBACK_MESSAGE = "Failed to load or parse the config file, using defaults."

DEFAULT_TRANSPORT_CONFIG: dict[str, Any] = {
    "protocol": "http",
    "host": "127.0.0.1",
    "port": 8001,
    "baseUri": "/rest/v1",
    "auth": {
        "type": "token",
        "token": "canvas-rest-api",
    },
    "timeout": 2000,
}


class Settings(BaseSettings):
    """Overrides read from CANVAS_* environment variables."""

    config_path: Path | None = None
    token: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="CANVAS_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached environment overrides."""
    return Settings()


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from canvas_shell/config/."""
    config_path = SETTINGS_DIR / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def load_logging_config() -> LoggingSchema:
    """Load and validate logging.yaml."""
    raw = load_yaml_config("logging.yaml")
    try:
        return LoggingSchema(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in logging.yaml:\n{e}") from e


def merge_config(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Merge overrides onto defaults.

    Top-level keys are replaced. Nested objects present on both sides are
    merged key by key, so a partial override such as {"auth": {"token": "x"}}
    keeps the default auth.type instead of dropping it.
    """
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def resolve_config_path(path: Path | None = None, settings: Settings | None = None) -> Path:
    """Explicit path wins, then CANVAS_CONFIG_PATH, then the default location."""
    if path is not None:
        return path
    settings = settings or get_settings()
    return settings.config_path or DEFAULT_CONFIG_PATH


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read the transport JSON file.

    Returns:
        The decoded object, or an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            loaded = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Expected a JSON object in {path}, got {type(loaded).__name__}")
    return loaded


def build_transport_config(
    overrides: dict[str, Any],
    settings: Settings | None = None,
) -> TransportSchema:
    """
    Merge overrides over the defaults, apply environment overrides and validate.

    Raises:
        ConfigError: If the merged configuration fails validation.
    """
    settings = settings or get_settings()
    merged = merge_config(DEFAULT_TRANSPORT_CONFIG, overrides)
    if settings.token:
        merged["auth"] = {**merged.get("auth", {}), "token": settings.token}

    try:
        return TransportSchema.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid transport configuration:\n{e}") from e


def load_transport_config(
    path: Path | None = None,
    settings: Settings | None = None,
) -> TransportSchema:
    """
    Load the effective transport configuration.

    Never raises for a bad user file: the failure is logged as a warning and
    the documented defaults are returned.
    """
    # Imported here: logging itself loads its settings through this module.
    from canvas_shell.core.logging import get_logger, log_with_source

    settings = settings or get_settings()
    config_path = resolve_config_path(path, settings)

    try:
        return build_transport_config(read_config_file(config_path), settings)
    except ConfigError as e:
        log_with_source(
            get_logger(__name__),
            "config",
            "warning",
            CONFIG_FALLBACK_MESSAGE,
            path=str(config_path),
            error=e.message,
        )
        return build_transport_config({}, settings)
