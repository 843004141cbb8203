"""
Path command implementation.

Prints where a release is installed without touching the network.
"""

import logging

from protoc_fetcher.core import cache
from protoc_fetcher.core.platform import resolve
from protoc_fetcher.core.release import build_release_name

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the path command.

    Args:
        args: Parsed command-line arguments

    Returns:
        0 if the release is installed, 1 otherwise
    """
    key = resolve()
    release_name = build_release_name(args.release_version, key)
    entry = cache.entry_path(args.out_dir, release_name)

    print(cache.binary_path(entry, key))

    if cache.is_installed(entry, key):
        return 0

    logger.info(f"{release_name} is not installed under {args.out_dir}")
    return 1
