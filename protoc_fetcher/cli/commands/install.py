"""
Install command implementation.

Installs a protoc release (or reuses the cached copy) and prints its path.
"""

import logging
from dataclasses import replace

from protoc_fetcher.cli.utils import load_cli_config
from protoc_fetcher.installer import Installer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)
    if args.lock:
        config = replace(config, use_lock=True)

    logger.debug(f"Arguments: {args}")

    result = Installer(config).install_detailed(args.release_version, args.out_dir)

    if args.export:
        print(f"PROTOC={result.binary_path}")
    else:
        print(result.binary_path)

    return 0
