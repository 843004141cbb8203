"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path

from protoc_fetcher.config import DEFAULT_CONFIG_FILENAME, FetcherConfig, load_config

logger = logging.getLogger(__name__)


def load_cli_config(args) -> FetcherConfig:
    """
    Load configuration for a CLI invocation.

    An explicit ``--config`` file must exist; otherwise
    ./protoc-fetcher.yaml is used when present.

    Args:
        args: Parsed arguments with an optional ``config`` attribute

    Returns:
        FetcherConfig

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    explicit = getattr(args, "config", None)
    if explicit:
        return load_config(Path(explicit), required=True)

    return load_config(Path.cwd() / DEFAULT_CONFIG_FILENAME, required=False)
