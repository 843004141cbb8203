"""YAML configuration for protoc-fetcher.

Configuration is optional. A file looks like::

    protoc_fetcher:
      download_timeout: 120
      version_timeout: 30
      use_lock: true
      lock_timeout: 300

The top-level ``protoc_fetcher`` key may be omitted.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from protoc_fetcher.core.exceptions import ProtocFetcherError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "protoc-fetcher.yaml"


class ConfigError(ProtocFetcherError):
    """Configuration parsing or validation error."""

    pass


@dataclass
class FetcherConfig:
    """Settings for the install workflow."""

    download_timeout: Optional[float] = None  # None: no timeout
    version_timeout: float = 30.0  # seconds allowed for 'protoc --version'
    use_lock: bool = False
    lock_timeout: float = 300.0


def load_config(config_path: Path, required: bool = False) -> FetcherConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file
        required: If True, a missing file is an error

    Returns:
        Parsed configuration (defaults if the file is missing and optional)

    Raises:
        ConfigError: If the file is required but missing, or is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        logger.debug(f"Config file not found (optional): {config_path}")
        return FetcherConfig()

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    return parse_config(data or {})


def parse_config(data: Dict[str, Any]) -> FetcherConfig:
    """Validate a configuration mapping and build a FetcherConfig."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    if "protoc_fetcher" in data:
        data = data["protoc_fetcher"] or {}
        if not isinstance(data, dict):
            raise ConfigError("'protoc_fetcher' must be a mapping")

    known = {f.name for f in fields(FetcherConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = FetcherConfig()

    if "download_timeout" in data:
        config.download_timeout = _optional_number(data, "download_timeout")
    if "version_timeout" in data:
        config.version_timeout = _positive_number(data, "version_timeout")
    if "use_lock" in data:
        if not isinstance(data["use_lock"], bool):
            raise ConfigError("'use_lock' must be true or false")
        config.use_lock = data["use_lock"]
    if "lock_timeout" in data:
        value = data["lock_timeout"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ConfigError("'lock_timeout' must be a non-negative number")
        config.lock_timeout = float(value)

    return config


def _optional_number(data: Dict[str, Any], key: str) -> Optional[float]:
    if data[key] is None:
        return None
    return _positive_number(data, key)


def _positive_number(data: Dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number")
    return float(value)


__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "ConfigError",
    "FetcherConfig",
    "load_config",
    "parse_config",
]
