"""
mnemnk-screen Configuration
===========================

This module handles configuration for the screen agent.

There are two layers:
    - Settings: process-level settings (agent identity, logging, initial
      screen configuration), loaded once at startup.
    - AgentConfig: the live capture configuration. It is replaced wholesale
      whenever the orchestrator sends a `.CONFIG` command.

Settings Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. YAML settings file
    3. Default values (lowest priority)

Environment Variable Mapping:
    MNEMNK_SCREEN_LOG_LEVEL  -> logging.level
    MNEMNK_SCREEN_LOG_FORMAT -> logging.format
    MNEMNK_SCREEN_INTERVAL   -> screen.interval

Example:
    from mnemnk_screen.config import load_settings, parse_agent_config

    settings = load_settings()
    config = parse_agent_config('{"interval": 5}', base=settings.screen)
    print(config.interval)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration field is present but malformed."""
    pass


# =============================================================================
# Live Agent Configuration
# =============================================================================

class AgentConfig(BaseModel):
    """
    Capture configuration for exactly one capture cycle.

    Field names match the JSON keys accepted on the control channel.
    Types are strict: a present field with the wrong JSON type is rejected
    instead of coerced.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    interval: int = Field(
        default=60,
        strict=True,
        ge=1,
        description="Capture interval in seconds",
    )
    almost_black_threshold: int = Field(
        default=20,
        strict=True,
        ge=0,
        le=255,
        description="An RGB channel below this value is considered black",
    )
    non_blank_threshold: int = Field(
        default=400,
        strict=True,
        ge=0,
        description="Sampled non-black pixels needed to consider the screen non-blank",
    )
    same_screen_ratio: float = Field(
        default=0.01,
        strict=True,
        ge=0.0,
        le=1.0,
        description="Screens whose changed-pixel ratio is below this are the same",
    )


# Alternate spellings accepted for AgentConfig keys
_FIELD_ALIASES: Dict[str, str] = {
    "interval_seconds": "interval",
    "non_blank_pixel_threshold": "non_blank_threshold",
    "same_screen_threshold": "same_screen_ratio",
}


def _normalize_keys(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map alias keys to field names and drop unrecognized keys.

    A field name given directly always wins over its alias, whatever the
    key order in the payload.
    """
    normalized: Dict[str, Any] = {
        key: value for key, value in payload.items() if key in AgentConfig.model_fields
    }
    for alias, name in _FIELD_ALIASES.items():
        if alias not in payload:
            continue
        if name in payload:
            logger.warning(f"Config keys {name!r} and {alias!r} both given, using {name!r}")
            continue
        normalized[name] = payload[alias]
    return normalized


def parse_agent_config(
    payload: str,
    base: Optional[AgentConfig] = None,
) -> AgentConfig:
    """
    Build an AgentConfig from a JSON payload.

    Missing fields keep their value from `base` (defaults when `base` is
    None). A payload that is not a JSON object leaves `base` unchanged.
    A field that is present but has the wrong type or range is an error.

    Args:
        payload: JSON text, typically the argument of a `.CONFIG` command
        base: Configuration providing values for unspecified fields

    Returns:
        AgentConfig: New configuration snapshot

    Raises:
        ConfigError: If a recognized field is malformed
    """
    if base is None:
        base = AgentConfig()

    try:
        data = json.loads(payload) if payload.strip() else None
    except json.JSONDecodeError as e:
        logger.warning(f"Config payload is not valid JSON, keeping current values: {e}")
        return base

    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Config payload is not a JSON object, keeping current values")
        return base

    overrides = _normalize_keys(data)
    if not overrides:
        return base

    try:
        return AgentConfig.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ConfigError(f"Malformed config field(s): {fields}") from e


# =============================================================================
# Process Settings
# =============================================================================

class AgentInfo(BaseModel):
    """Agent identification."""

    name: str = Field(default="mnemnk-screen", description="Agent name")
    version: str = Field(default="v0.1.0", description="Agent version")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for mnemnk-screen.

    Loads configuration from a YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    agent: AgentInfo = Field(default_factory=AgentInfo)
    screen: AgentConfig = Field(default_factory=AgentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(settings_path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML settings file
        3. Default values

    Args:
        settings_path: Path to a YAML file. If None, searches the working directory.

    Returns:
        Settings: Loaded settings

    Raises:
        pydantic.ValidationError: If the merged settings are invalid
    """
    if settings_path is None:
        for path in (Path("mnemnk-screen.yaml"), Path("config.yaml")):
            if path.exists():
                settings_path = str(path)
                break

    config_data: Dict[str, Any] = {}
    if settings_path and Path(settings_path).exists():
        logger.info(f"Loading settings from: {settings_path}")
        with open(settings_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    elif settings_path:
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to settings data."""

    if env_level := os.environ.get("MNEMNK_SCREEN_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_level
    if env_format := os.environ.get("MNEMNK_SCREEN_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format

    if env_interval := os.environ.get("MNEMNK_SCREEN_INTERVAL"):
        config_data.setdefault("screen", {})["interval"] = int(env_interval)


def setup_logging(settings: Settings) -> None:
    """
    Configure logging based on settings.

    Logs always go to stderr; stdout is reserved for agent output lines.
    """
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
