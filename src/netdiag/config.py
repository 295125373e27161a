"""
Configuration system for netdiag.

Implements 12-factor config principles:
- Environment variables as primary config source
- Optional config file (YAML or JSON) for local development

Usage:
    from netdiag.config import get_config

    config = get_config()
    engine = DiagnosticEngine(ruleset, config=config)

Environment variables:
    NETDIAG_ENVIRONMENT=production
    NETDIAG_RULES_PATH=/etc/netdiag/rules.yaml
    NETDIAG_HIGH_CONFIDENCE_THRESHOLD=65
    NETDIAG_MEDIUM_CONFIDENCE_THRESHOLD=40
    NETDIAG_LOG_LEVEL=INFO
    NETDIAG_METRICS_ENABLED=true
    NETDIAG_CONFIG_FILE=netdiag.yaml
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from netdiag.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Environment profiles."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """Parse environment from string, defaulting to development."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.DEVELOPMENT


class Config(BaseModel):
    """
    netdiag configuration.

    The confidence thresholds bucket the primary cause's percentage into
    High / Medium / Low.
    """

    model_config = ConfigDict(frozen=True)

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment (development/staging/production)",
    )
    rules_path: Path | None = Field(
        default=None,
        description="Rule-set document to load; None uses the packaged default",
    )
    high_confidence_threshold: int = Field(
        default=65,
        ge=0,
        le=100,
        description="Minimum confidence percent for High",
    )
    medium_confidence_threshold: int = Field(
        default=40,
        ge=0,
        le=100,
        description="Minimum confidence percent for Medium",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI",
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Enable engine metrics collection",
    )

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Config":
        if self.medium_confidence_threshold > self.high_confidence_threshold:
            raise ValueError(
                "medium_confidence_threshold must not exceed high_confidence_threshold"
            )
        return self


def _parse_env_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_env_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Could not parse integer setting %r, using %d", value, default)
        return default


def _build_config(data: dict[str, Any], source: str) -> Config:
    try:
        return Config(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid configuration from {source}: {first.get('msg')}",
            config_key=key,
        ) from e


def load_config_from_env() -> Config:
    """Load configuration from NETDIAG_* environment variables."""
    config_kwargs: dict[str, Any] = {
        "environment": Environment.from_string(
            os.environ.get("NETDIAG_ENVIRONMENT", "development")
        ),
        "high_confidence_threshold": _parse_env_int(
            os.environ.get("NETDIAG_HIGH_CONFIDENCE_THRESHOLD"), 65
        ),
        "medium_confidence_threshold": _parse_env_int(
            os.environ.get("NETDIAG_MEDIUM_CONFIDENCE_THRESHOLD"), 40
        ),
        "log_level": os.environ.get("NETDIAG_LOG_LEVEL", "WARNING").upper(),
        "metrics_enabled": _parse_env_bool(
            os.environ.get("NETDIAG_METRICS_ENABLED"), True
        ),
    }

    rules_path = os.environ.get("NETDIAG_RULES_PATH")
    if rules_path:
        config_kwargs["rules_path"] = Path(rules_path)

    return _build_config(config_kwargs, "environment")


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a JSON or YAML file.

    Falls back to environment variables if the file does not exist.
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        raw = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    return _build_config(data, str(path))


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Loads from:
    1. NETDIAG_CONFIG_FILE environment variable (if set)
    2. Environment variables (default)

    Result is cached for the lifetime of the process.
    """
    config_file = os.environ.get("NETDIAG_CONFIG_FILE")

    if config_file:
        return load_config_from_file(Path(config_file))

    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
