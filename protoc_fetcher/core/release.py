"""
Release naming for upstream protoc archives.

Both functions are pure string composition so they can be tested without
network or filesystem access.
"""

from protoc_fetcher.core.platform import PlatformKey

RELEASES_BASE_URL = "https://github.com/protocolbuffers/protobuf/releases/download"
ARCHIVE_EXTENSION = "zip"


def build_release_name(version: str, platform_key: PlatformKey) -> str:
    """
    Build the release name for a version on a platform.

    Args:
        version: Upstream version without a 'v' prefix (e.g. '28.0')
        platform_key: Resolved platform

    Returns:
        Release name, e.g. 'protoc-28.0-linux-x86_64'
    """
    return f"protoc-{version}-{platform_key.release_suffix}"


def build_archive_url(release_name: str, version: str) -> str:
    """
    Build the download URL of a release archive.

    Example:
        >>> build_archive_url("protoc-28.0-win64", "28.0")
        'https://github.com/protocolbuffers/protobuf/releases/download/v28.0/protoc-28.0-win64.zip'
    """
    return f"{RELEASES_BASE_URL}/v{version}/{release_name}.{ARCHIVE_EXTENSION}"


__all__ = [
    "RELEASES_BASE_URL",
    "ARCHIVE_EXTENSION",
    "build_release_name",
    "build_archive_url",
]
