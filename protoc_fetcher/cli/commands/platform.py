"""
Platform command implementation.

Shows the detected platform and, optionally, release naming for a version.
"""

from protoc_fetcher.core.platform import resolve
from protoc_fetcher.core.release import build_archive_url, build_release_name


def run(args) -> int:
    """
    Run the platform command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    key = resolve()

    print(f"Platform: {key}")
    print(f"Release suffix: {key.release_suffix}")

    if args.release_version:
        release_name = build_release_name(args.release_version, key)
        print(f"Release name: {release_name}")
        print(f"Archive URL: {build_archive_url(release_name, args.release_version)}")

    return 0
