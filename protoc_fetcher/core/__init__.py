"""
Core functionality for protoc-fetcher.

This package contains the building blocks of the install workflow: platform
resolution, release naming, the on-disk cache layout, download, extraction
and the optional install lock.
"""

from .exceptions import (
    ProtocFetcherError,
    UnsupportedPlatform,
    NetworkError,
    DownloadFailed,
    ExtractionFailed,
    MissingBinaryInArchive,
    ExecutionFailed,
    EntryLockTimeout,
)

from .platform import (
    PlatformKey,
    resolve,
    is_supported_platform,
    get_supported_platforms,
)

from .release import (
    build_release_name,
    build_archive_url,
)

from .cache import (
    entry_path,
    binary_path,
    binary_relative_path,
    is_installed,
    finalize,
)

from .download import download
from .filesystem import extract
from .locking import entry_lock

__all__ = [
    "ProtocFetcherError",
    "UnsupportedPlatform",
    "NetworkError",
    "DownloadFailed",
    "ExtractionFailed",
    "MissingBinaryInArchive",
    "ExecutionFailed",
    "EntryLockTimeout",
    "PlatformKey",
    "resolve",
    "is_supported_platform",
    "get_supported_platforms",
    "build_release_name",
    "build_archive_url",
    "entry_path",
    "binary_path",
    "binary_relative_path",
    "is_installed",
    "finalize",
    "download",
    "extract",
    "entry_lock",
]
