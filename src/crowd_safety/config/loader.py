"""
Configuration Loader - YAML loading, environment overrides and validation.

Search order when no path is given:
1. ./crowd_safety.yaml
2. ~/.config/crowd-safety/config.yaml
3. Built-in defaults
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.constants import (
    ENV_DENSITY_THRESHOLD,
    ENV_FALLING_VELOCITY,
    ENV_LOG_LEVEL,
    ENV_SURGE_THRESHOLD,
)
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "crowd_safety.yaml"

# env var -> (section, key)
_FLOAT_OVERRIDES = {
    ENV_DENSITY_THRESHOLD: ("analyzer", "density_threshold"),
    ENV_SURGE_THRESHOLD: ("analyzer", "surge_threshold"),
    ENV_FALLING_VELOCITY: ("analyzer", "falling_velocity_threshold"),
}


class ConfigValidationError(Exception):
    """Raised when config loading or validation fails."""


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None to use defaults

    Raises:
        ConfigValidationError: If a specified path does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigValidationError(f"Specified config file not found: {config_path}")
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "crowd-safety" / "config.yaml",
    ]
    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    logger.debug("No config file found, using defaults")
    return None


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied

    Raises:
        ConfigValidationError: If an override is not a number
    """
    for env_var, (section, key) in _FLOAT_OVERRIDES.items():
        if env_var not in os.environ:
            continue
        raw = os.environ[env_var]
        try:
            value = float(raw)
        except ValueError as e:
            raise ConfigValidationError(f"{env_var} must be a number, got '{raw}'") from e
        logger.info(f"Using {section}.{key} from environment: {env_var}")
        config.setdefault(section, {})[key] = value

    if ENV_LOG_LEVEL in os.environ:
        config.setdefault("logging", {})["level"] = os.environ[ENV_LOG_LEVEL].upper()

    return config


def _read_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_config(config_path: str | None = None) -> Config:
    """
    Load, override and validate configuration.

    Supports pointer files: if the file only contains `use: path/to/config.yaml`,
    that file is loaded instead (resolved relative to the pointer file).

    Args:
        config_path: Optional explicit path to a YAML config

    Returns:
        Validated Config

    Raises:
        ConfigValidationError: If the file is missing, unreadable or invalid
    """
    config_file = find_config_file(config_path)
    raw: dict = {}

    if config_file is not None:
        try:
            raw = _read_yaml(config_file)

            if isinstance(raw, dict) and list(raw.keys()) == ["use"]:
                pointer_path = config_file.parent / raw["use"]
                logger.info(f"Config pointer: {config_file} -> {raw['use']}")
                raw = _read_yaml(pointer_path)
                config_file = pointer_path

        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            raise ConfigValidationError(f"Cannot read {config_file}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigValidationError(f"Config root must be a mapping: {config_file}")

        logger.info(f"Configuration loaded from {config_file}")

    raw = load_config_with_env(raw)

    try:
        return validate_config_pydantic(raw)
    except ValidationError as e:
        raise ConfigValidationError(str(e)) from e
