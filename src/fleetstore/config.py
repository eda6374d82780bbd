"""fleetstore configuration: Pydantic model, load, and logging setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fleetstore.exceptions import ConfigError

DEFAULT_BASE_URL = "http://localhost:9000"
DEFAULT_API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ApiConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    prefix: str = DEFAULT_API_PREFIX
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()


class ConsoleConfig(BaseModel):
    """Root configuration model."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _config_file_path() -> Path | None:
    if env_path := os.environ.get("FLEETSTORE_CONFIG"):
        return Path(env_path)
    return None


def load_config(path: Path | None = None) -> ConsoleConfig:
    """
    Load ConsoleConfig from a TOML file, overlaid with environment variables.

    Priority (highest to lowest):
      1. Environment variables (FLEETSTORE_*)
      2. Config file (path argument, else $FLEETSTORE_CONFIG)
      3. Defaults
    """
    import tomllib

    cfg_path = path or _config_file_path()
    data: dict[str, Any] = {}

    if cfg_path is not None:
        if not cfg_path.exists():
            raise ConfigError(f"Config file not found: {cfg_path}")
        try:
            with open(cfg_path, "rb") as f:
                data = tomllib.load(f)
        except Exception as exc:
            raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc

    _apply_env_overrides(data)

    try:
        return ConsoleConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Invalid config{f' at {cfg_path}' if cfg_path else ''}: {exc}") from exc


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Overlay FLEETSTORE_* environment variables onto the parsed TOML data."""
    if base_url := os.environ.get("FLEETSTORE_BASE_URL"):
        data.setdefault("api", {})["base_url"] = base_url
    if prefix := os.environ.get("FLEETSTORE_API_PREFIX"):
        data.setdefault("api", {})["prefix"] = prefix
    if timeout := os.environ.get("FLEETSTORE_TIMEOUT"):
        data.setdefault("api", {})["timeout_seconds"] = timeout
    if level := os.environ.get("FLEETSTORE_LOG_LEVEL"):
        data.setdefault("logging", {})["level"] = level


def configure_logging(config: ConsoleConfig) -> None:
    """Apply the configured level to the fleetstore logger tree."""
    logging.getLogger("fleetstore").setLevel(config.logging.level)
