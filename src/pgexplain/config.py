"""
Configuration system for pgexplain.

Settings come from three layers, later layers winning:
- Built-in defaults on the Config model
- PGEXPLAIN_* environment variables
- An optional YAML (or JSON) config file

Command-line flags override all of them.

Usage:
    from pgexplain.config import get_config

    config = get_config()
    if config.threshold > 0:
        ...

Config file lookup order:
1. PGEXPLAIN_CONFIG_FILE environment variable (if set)
2. ~/.pgexplainrc
3. ./.pgexplainrc
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pgexplain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".pgexplainrc"
OUTPUT_FORMATS = ("text", "json", "markdown", "csv")

# Short keys accepted in config files
FILE_KEY_ALIASES = {"format": "default_format"}

DEFAULT_CONFIG_TEMPLATE = """\
# pgexplain configuration
#
# Command-line flags always take precedence over these values.

# Output format: text, json, markdown or csv
format: text

# Cost alert threshold; 0 disables the alert
threshold: 0

# Minimum operation cost considered for index recommendations
index_threshold: 100

# Generate index recommendations without passing --recommend-indexes
recommend_indexes: false
"""


class Config(BaseModel):
    """
    pgexplain configuration.

    Loaded from environment variables and an optional config file.
    """

    model_config = ConfigDict(frozen=True)

    default_format: str = Field(
        default="text",
        description="Output format when --format is not given",
    )
    threshold: float = Field(
        default=0.0,
        ge=0,
        description="Cost alert threshold (0 disables the alert)",
    )
    index_threshold: float = Field(
        default=100.0,
        ge=0,
        description="Minimum cost for a node to be considered for indexing",
    )
    recommend_indexes: bool = Field(
        default=False,
        description="Generate index recommendations by default",
    )

    @field_validator("default_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"format must be one of {', '.join(OUTPUT_FORMATS)}")
        return value


def _parse_env_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_env_float(value: str | None, default: float) -> float:
    """Parse float from environment variable."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Could not parse float %r, using %s", value, default)
        return default


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Examples:
    - PGEXPLAIN_FORMAT=json
    - PGEXPLAIN_THRESHOLD=1000
    - PGEXPLAIN_INDEX_THRESHOLD=250
    - PGEXPLAIN_RECOMMEND_INDEXES=true
    """
    config_kwargs: dict[str, Any] = {
        "default_format": os.environ.get("PGEXPLAIN_FORMAT", "text"),
        "threshold": _parse_env_float(os.environ.get("PGEXPLAIN_THRESHOLD"), 0.0),
        "index_threshold": _parse_env_float(
            os.environ.get("PGEXPLAIN_INDEX_THRESHOLD"), 100.0
        ),
        "recommend_indexes": _parse_env_bool(
            os.environ.get("PGEXPLAIN_RECOMMEND_INDEXES"), False
        ),
    }

    try:
        return Config(**config_kwargs)
    except ValidationError as e:
        logger.warning("Ignoring invalid PGEXPLAIN_* settings: %s", e)
        return Config()


def read_config_file(path: Path) -> Config:
    """
    Parse a config file strictly, layered over the environment.

    Files ending in .json are read as JSON, anything else as YAML.

    Raises:
        ConfigurationError: If the file is unreadable, malformed or holds
            invalid values.
    """
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    data = {FILE_KEY_ALIASES.get(key, key): value for key, value in data.items()}
    base = load_config_from_env().model_dump()

    try:
        return Config(**{**base, **data})
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigurationError(
            f"Invalid value in {path}: {first['msg']}", config_key=key
        ) from e


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a YAML or JSON file.

    Falls back to environment variables when the file is missing or
    invalid, logging a warning.
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        return read_config_file(path)
    except ConfigurationError as e:
        logger.warning("%s; using environment", e.message)
        return load_config_from_env()


def find_config_file() -> Path | None:
    """Return the first config file in lookup order, or None."""
    explicit = os.environ.get("PGEXPLAIN_CONFIG_FILE")
    if explicit:
        return Path(explicit)

    for candidate in (Path.home() / CONFIG_FILENAME, Path.cwd() / CONFIG_FILENAME):
        if candidate.is_file():
            return candidate
    return None


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Result is cached for the lifetime of the process.
    """
    path = find_config_file()
    if path is not None:
        logger.debug("Loading config from %s", path)
        return load_config_from_file(path)
    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()


def write_config_template(path: Path, force: bool = False) -> Path:
    """
    Write DEFAULT_CONFIG_TEMPLATE to path.

    Raises:
        ConfigurationError: If the file exists and force is False, or
            cannot be written.
    """
    if path.exists() and not force:
        raise ConfigurationError(
            f"Config file already exists: {path} (use --force to overwrite)",
            config_key=str(path),
        )
    try:
        path.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write {path}: {e}", config_key=str(path)) from e
    return path
